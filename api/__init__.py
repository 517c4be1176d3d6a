import click
from flask import Flask
from flasgger import Swagger
from flask_cors import CORS
import logging

from .config import get_config
from .errors import register_error_handlers, success_response
from models import storage  # DBStorage singleton (scoped_session)
from utils.session import init_session_filter

# Swagger config: exposes /swagger.json and UI at /apidocs
SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Reading Club API",
        "version": "1.0.0",
        "description": "REST API for a book reading club: OAuth login, reading records, posts, comments and reading groups.",
    },
    "basePath": "/",
    "schemes": ["http", "https"],
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "Enter the access token with the `Bearer ` prefix, e.g. \"Bearer abcde12345\"."
        }
    }
}

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": "apispec_1",
            "route": "/swagger.json",
            "rule_filter": lambda rule: True,   # include all endpoints
            "model_filter": lambda tag: True,   # include all models
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/",
}


def register_cli(app):
    @app.cli.command("sweep-tokens")
    def sweep_tokens():
        """Delete refresh tokens whose expiry has passed."""
        from services.token_store import RefreshTokenStore

        removed = RefreshTokenStore().sweep_expired()
        storage.save()
        click.echo(f"Removed {removed} expired refresh tokens")


def create_app(config_name: str | None = None) -> Flask:
    """
    Application factory: creates and configures the Flask app.
    """
    app = Flask(__name__)
    app.config.from_object(get_config(config_name))

    logging.basicConfig(
        level=app.config.get("LOG_LEVEL", "INFO"),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    CORS(app, resources={r"/*": {"origins": app.config.get("CORS_ORIGINS", "*")}})
    Swagger(app, template=SWAGGER_TEMPLATE, config=SWAGGER_CONFIG)

    # Global error handlers return the uniform response envelope
    register_error_handlers(app)
    # Bearer token -> g.auth, before any view runs
    init_session_filter(app)
    register_cli(app)

    from .health import bp as health_bp
    from .auth import bp as auth_bp
    from .users import bp as users_bp
    from .books import bp as books_bp
    from .posts import bp as posts_bp
    from .comments import bp as comments_bp
    from .reading_groups import bp as reading_groups_bp
    from .group_members import bp as group_members_bp
    from .meetings import bp as meetings_bp
    from .monthly_books import bp as monthly_books_bp
    from .wishlists import bp as wishlists_bp
    from .currently_reading import bp as currently_reading_bp
    from .dropped_books import bp as dropped_books_bp
    from .book_reviews import bp as book_reviews_bp

    app.register_blueprint(health_bp, url_prefix="/api")
    app.register_blueprint(auth_bp)
    app.register_blueprint(users_bp)
    app.register_blueprint(books_bp)
    app.register_blueprint(posts_bp)
    app.register_blueprint(comments_bp)
    app.register_blueprint(reading_groups_bp)
    app.register_blueprint(group_members_bp)
    app.register_blueprint(meetings_bp)
    app.register_blueprint(monthly_books_bp)
    app.register_blueprint(wishlists_bp)
    app.register_blueprint(currently_reading_bp)
    app.register_blueprint(dropped_books_bp)
    app.register_blueprint(book_reviews_bp)

    # Ensure the DB session is removed at the end of each request/app context
    @app.teardown_appcontext
    def remove_session(exception=None):
        storage.close()

    @app.route("/")
    def root():
        return success_response({
            "docs": "/apidocs/",
            "health": "/api/health",
        }, "Welcome to Reading Club API")

    return app
