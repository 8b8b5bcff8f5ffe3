"""
Request Context

Explicit per-request state handed to every workflow step: who is acting,
which roles they hold, which public origin links are built against, and the
clock used for timestamps.
"""

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, FrozenSet

from credtube.models.enums import AppRole

if TYPE_CHECKING:
    from credtube.models.user import User


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RequestContext:
    """
    Caller identity and environment for a single request.

    user_id is copied off the User row at construction; it stays readable
    after a rollback has expired the row.
    """

    user: "User"
    base_url: str
    roles: FrozenSet[AppRole] = frozenset()
    clock: Callable[[], datetime] = field(default=utc_now)
    user_id: uuid.UUID = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "user_id", self.user.id)

    def now(self) -> datetime:
        return self.clock()

    def has_role(self, role: AppRole) -> bool:
        return role in self.roles
