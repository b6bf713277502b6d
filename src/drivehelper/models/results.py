"""Result model returned by every helper operation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

from drivehelper.errors import DriveHelperError, ErrorKind, classify_error

T = TypeVar("T")


@dataclass(slots=True, frozen=True)
class Result(Generic[T]):
    """
    Outcome of a helper operation.

    A failed Result may still carry a value: a truncated listing keeps the
    items fetched before the failure, and can_upload reports False.
    """

    value: Optional[T] = None
    error: Optional[DriveHelperError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        if self.error is None:
            return None
        return classify_error(self.error)

    def unwrap(self) -> T:
        """Return the value, or raise the carried error."""
        if self.error is not None:
            raise self.error
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: T) -> Result[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: DriveHelperError, value: Optional[T] = None) -> Result[T]:
        return cls(value=value, error=error)

    def __bool__(self) -> bool:
        return self.ok
