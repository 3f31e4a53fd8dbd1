"""Domain errors raised by page sources."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(slots=True)
class DumpParseError(Exception):
    """A dump or harvested batch could not be read into page records."""

    source: str
    message: str

    def __str__(self) -> str:
        return f"{self.message} (source={self.source})"


@dataclass(frozen=True, slots=True)
class TaskFailure:
    """Outcome of one reader task that failed during fan-out."""

    index: int
    error: BaseException


@dataclass(slots=True)
class FanOutError(Exception):
    """Raised after a fan-out traversal when the caller opted into errors."""

    failures: list[TaskFailure] = field(default_factory=list)

    def __str__(self) -> str:
        details = "; ".join(f"reader {failure.index}: {failure.error}" for failure in self.failures)
        return f"{len(self.failures)} reader task(s) failed: {details}"
