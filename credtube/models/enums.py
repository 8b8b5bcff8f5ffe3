"""
Database Enums

Python Enums that map to PostgreSQL ENUM types.
"""

import enum


class AppRole(str, enum.Enum):
    """Role granted to a user through the user_roles table."""
    ADMIN = "admin"
    MODERATOR = "moderator"
    USER = "user"


class CredentialStatus(str, enum.Enum):
    """Lifecycle tag of a learning token. Only ISSUED is set by the quiz flow."""
    PENDING = "pending"
    ISSUED = "issued"
    VERIFIED = "verified"
    REVOKED = "revoked"


class QuizType(str, enum.Enum):
    """Quiz format."""
    MULTIPLE_CHOICE = "multiple_choice"
    CODING = "coding"
    TRUE_FALSE = "true_false"


def enum_values(enum_cls: type[enum.Enum]) -> list[str]:
    """Persist enum values (lowercase) rather than member names."""
    return [member.value for member in enum_cls]
