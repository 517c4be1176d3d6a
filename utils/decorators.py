from __future__ import annotations
from functools import wraps
from flask import g, abort


def login_required():
    """
    Require an authenticated principal (set by the session filter).
    The AuthContext is passed to the view as its first positional argument.
    """
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            auth = getattr(g, "auth", None)
            if auth is None:
                abort(401, description="Authentication required")
            return fn(auth, *args, **kwargs)

        return wrapper

    return decorator
