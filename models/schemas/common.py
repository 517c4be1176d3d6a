from datetime import date

from marshmallow import ValidationError


def normalize_isbn(raw: str) -> str:
    if raw is None:
        raise ValidationError("ISBN is required.")
    digits = "".join(ch for ch in raw if ch.isdigit() or ch.upper() == "X")
    # Keep 'X' only for ISBN-10 check-digit position
    return digits


def _is_valid_isbn10(digits: str) -> bool:
    if len(digits) != 10:
        return False
    total = 0
    for i, ch in enumerate(digits[:9], start=1):
        if not ch.isdigit():
            return False
        total += int(ch) * i
    check = digits[9]
    if check == "X":
        total += 10 * 10
    elif check.isdigit():
        total += int(check) * 10
    else:
        return False
    return total % 11 == 0


def _is_valid_isbn13(digits: str) -> bool:
    if len(digits) != 13 or not digits.isdigit():
        return False
    total = 0
    for i, ch in enumerate(digits[:12]):
        factor = 1 if i % 2 == 0 else 3
        total += int(ch) * factor
    check_digit = (10 - (total % 10)) % 10
    return check_digit == int(digits[12])


def validate_and_normalize_isbn(raw: str) -> str:
    digits = normalize_isbn(raw).upper()
    if len(digits) == 10 and _is_valid_isbn10(digits):
        return digits
    if len(digits) == 13 and _is_valid_isbn13(digits):
        return digits
    raise ValidationError("Invalid ISBN-10 or ISBN-13.")


def validate_not_future(d: date) -> None:
    if d and d > date.today():
        raise ValidationError("Date cannot be in the future.")


def strip_strings(data: dict, *keys) -> dict:
    """Trim surrounding whitespace on the given string keys (pre_load helper)."""
    if isinstance(data, dict):
        data = dict(data)
        for key in keys:
            if isinstance(data.get(key), str):
                data[key] = data[key].strip()
    return data
