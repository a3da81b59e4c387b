"""The authenticated identity attached to a request."""

from dataclasses import dataclass
from enum import Enum


class Role(Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


@dataclass(frozen=True)
class Principal:
    id: str
    name: str
    email: str
    role: Role = Role.CUSTOMER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
