import re

from rest_framework import serializers

_USERNAME_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")

# (predicate, message) pairs applied in order; the first failing rule wins.
_PASSWORD_RULES = (
    (lambda value: len(value) >= 8, "Password must be at least 8 characters long."),
    (lambda value: any(ch.isalpha() for ch in value), "Password must include at least one letter."),
    (lambda value: any(ch.isdigit() for ch in value), "Password must include at least one number."),
    (lambda value: not value.isspace(), "Password must not be blank."),
)


def validate_username(value: str) -> str:
    """Usernames are display handles: 3+ characters, letters, digits and ``_.-``."""
    if value is None:
        raise serializers.ValidationError("Username is required.")
    trimmed = value.strip()
    if len(trimmed) < 3:
        raise serializers.ValidationError("Username must be at least 3 characters long.")
    if not _USERNAME_PATTERN.match(trimmed):
        raise serializers.ValidationError(
            "Username may contain only letters, numbers and the characters _ . -"
        )
    return trimmed


def validate_password(value: str) -> str:
    if value is None:
        raise serializers.ValidationError("Password is required.")
    for rule, message in _PASSWORD_RULES:
        if not rule(value):
            raise serializers.ValidationError(message)
    return value


