"""
Value objects for the domain.

Value objects are immutable objects that are defined by their attributes
rather than their identity. They have no identity and are compared by value.
"""
import re
from abc import ABC
from dataclasses import dataclass
from enum import Enum

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


@dataclass(frozen=True)
class ValueObject(ABC):
    """
    Base class for value objects.

    Value objects are immutable and compared by value.
    """

    def __eq__(self, other):
        """Compare value objects by their attributes."""
        if not isinstance(other, self.__class__):
            return False
        return self.__dict__ == other.__dict__

    def __hash__(self):
        """Make value objects hashable."""
        return hash(tuple(sorted(self.__dict__.items())))


@dataclass(frozen=True)
class Email(ValueObject):
    """Email value object with validation, stored lower-cased."""

    value: str

    def __post_init__(self):
        """Validate and normalise email format."""
        if not self.value or not _EMAIL_RE.match(self.value.strip()):
            raise ValueError(f"Invalid email address: {self.value}")
        object.__setattr__(self, "value", self.value.strip().lower())

    def __str__(self) -> str:
        """Return email as string."""
        return self.value


class Tier(Enum):
    """Usage tier a prompt cleaning request is served at."""

    FREE = "free"
    PRO = "pro"

    def __str__(self) -> str:
        """Return tier as string."""
        return self.value
