from marshmallow import ValidationError

PASSWORD_MIN_LENGTH = 8
PASSWORD_MAX_LENGTH = 128


def normalize_email(raw):
    """Trim and lowercase an email so lookups and the unique index agree."""
    return raw.strip().lower() if isinstance(raw, str) else raw


def validate_password_strength(value: str) -> None:
    if value is None:
        raise ValidationError("Password is required.")
    if len(value) < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long.")
    if len(value) > PASSWORD_MAX_LENGTH:
        raise ValidationError(f"Password must be at most {PASSWORD_MAX_LENGTH} characters long.")
    if not any(ch.isalpha() for ch in value) or not any(ch.isdigit() for ch in value):
        raise ValidationError("Password must contain at least one letter and one digit.")
