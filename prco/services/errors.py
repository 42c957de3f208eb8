from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class InvalidRequest:
    field: str
    reason: str

    def __str__(self) -> str:
        return f"invalid request: {self.field} {self.reason}"


@dataclass(frozen=True, slots=True)
class ApiFailed:
    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"GET {self.url}: HTTP {self.status}: {self.message}"
        return f"GET {self.url}: {self.message}"


@dataclass(frozen=True, slots=True)
class NotMergeable:
    number: int
    mergeable_state: str | None = None

    def __str__(self) -> str:
        detail = f" (mergeable_state: {self.mergeable_state})" if self.mergeable_state else ""
        return f"pull request #{self.number} isn't mergeable{detail}"


@dataclass(frozen=True, slots=True)
class PollTimeout:
    number: int
    attempts: int
    timeout: float

    def __str__(self) -> str:
        return (
            f"timeout: mergeability of pull request #{self.number} still unknown "
            f"after {self.attempts} attempts ({self.timeout:g}s)"
        )


@dataclass(frozen=True, slots=True)
class Cancelled:
    step: str

    def __str__(self) -> str:
        return f"cancelled during {self.step}"


@dataclass(frozen=True, slots=True)
class CommandFailed:
    command: str
    returncode: int
    message: str
    timed_out: bool = False
    killed: bool = False

    def __str__(self) -> str:
        return f"{self.command}: {self.message}"


CheckoutError = (
    InvalidRequest | ApiFailed | NotMergeable | PollTimeout | Cancelled | CommandFailed
)
