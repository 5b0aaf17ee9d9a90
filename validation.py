# validation.py
from email_validator import EmailNotValidError, validate_email

USERNAME_MIN_LENGTH = 5


def _is_empty(value) -> bool:
    return value is None or value == ""


def _valid_email(value) -> bool:
    if not isinstance(value, str):
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def validate_user(payload: dict) -> list:
    """
    Checks a registration or profile-update payload.
    Every rule runs; the result lists each violation as {"field", "message"}
    and is empty when the payload is acceptable.
    """
    errors = []

    username = payload.get("username")
    if not isinstance(username, str) or len(username) < USERNAME_MIN_LENGTH:
        errors.append({"field": "username", "message": "Username is required"})
    if not isinstance(username, str) or not username.isascii() or not username.isalnum():
        errors.append({
            "field": "username",
            "message": "Username contains non alphanumeric characters - not allowed",
        })

    if _is_empty(payload.get("password")):
        errors.append({"field": "password", "message": "Password is required"})

    if not _valid_email(payload.get("email")):
        errors.append({"field": "email", "message": "Email does not appear to be valid"})

    return errors
