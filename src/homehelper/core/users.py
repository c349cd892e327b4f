"""Household users and their roles."""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    OWNER = "Owner"
    HELPER = "Helper"


@dataclass
class User:
    """A member of the household."""

    id: str
    name: str
    role: Role
    email: str = ""
    is_active: bool = True

    @property
    def is_owner(self) -> bool:
        return self.role is Role.OWNER

    def to_record(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "role": self.role.value,
            "email": self.email,
            "is_active": self.is_active,
        }

    @classmethod
    def from_record(cls, data: dict) -> "User":
        return cls(
            id=data["id"],
            name=data.get("name", ""),
            role=Role(data.get("role", Role.HELPER.value)),
            email=data.get("email", ""),
            is_active=data.get("is_active", True),
        )
