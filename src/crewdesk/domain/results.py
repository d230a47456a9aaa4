"""Tagged results returned by store mutations."""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

from crewdesk.domain.errors import NotFoundError

T = TypeVar("T")


class MutationStatus(Enum):
    OK = "ok"
    NOT_FOUND = "not_found"


@dataclass(frozen=True)
class MutationResult(Generic[T]):
    """Outcome of a mutation: the changed value, or which id was missing."""

    status: MutationStatus
    value: T | None = None
    missing_kind: str | None = None
    missing_id: str | None = None

    @classmethod
    def ok(cls, value: T) -> "MutationResult[T]":
        return cls(status=MutationStatus.OK, value=value)

    @classmethod
    def not_found(cls, kind: str, entity_id: str) -> "MutationResult[T]":
        return cls(
            status=MutationStatus.NOT_FOUND, missing_kind=kind, missing_id=entity_id
        )

    @property
    def is_ok(self) -> bool:
        return self.status is MutationStatus.OK

    def unwrap(self) -> T:
        """Return the value or raise ``NotFoundError``."""
        if self.status is MutationStatus.NOT_FOUND:
            raise NotFoundError(self.missing_kind or "entity", self.missing_id or "")
        return self.value  # type: ignore[return-value]
