"""
The authenticated identity threaded through every operation.

Anonymous readers are represented by ``None`` rather than a sentinel
identity, so ``Optional[Identity]`` in a signature marks a public path.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Role(str, Enum):
    ADMIN = "admin"
    USER = "user"


@dataclass(frozen=True)
class Identity:
    user_id: str
    email: str = ""
    full_name: str = ""
    roles: frozenset[Role] = field(default_factory=frozenset)

    @property
    def is_admin(self) -> bool:
        return Role.ADMIN in self.roles
