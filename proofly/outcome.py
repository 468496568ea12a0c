from dataclasses import dataclass
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Explicit result of a non-fatal collaborator call.

    Collaborators whose failure must degrade the run rather than abort it
    (attestation, notification, result cache) return an Outcome so the
    orchestrator can branch on ``ok`` instead of suppressing exceptions.
    """

    value: T | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, error: str) -> "Outcome[T]":
        return cls(error=error or "unknown error")
