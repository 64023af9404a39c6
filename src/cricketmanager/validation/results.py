"""Typed operation results.

Public operations never raise across the package boundary. They return an
:class:`Outcome` that either carries a value or a :class:`CoreError` naming
the :class:`ErrorKind` and a human-readable detail.
"""

# Cricket Manager
# Copyright (C) 2025  Cricket Manager developers
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE.  See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License
# along with this program.  If not, see <http://www.gnu.org/licenses/>.

from dataclasses import dataclass
from typing import Any, Dict, Generic, Optional, TypeVar

from cricketmanager.exceptions import EXCEPTION_FOR_KIND, CricketManagerException
from cricketmanager.models.enums import ErrorKind

T = TypeVar("T")


@dataclass(frozen=True)
class CoreError:
    """A typed failure.

    Attributes
    ----------
    kind : ErrorKind
        What went wrong, for targeted handling.
    detail : str
        Message suitable for showing to the user.
    """

    kind: ErrorKind
    detail: str

    @property
    def is_retryable(self) -> bool:
        return self.kind.is_retryable

    def to_dict(self) -> Dict[str, Any]:
        return {"kind": self.kind.value, "detail": self.detail}

    def to_exception(self) -> CricketManagerException:
        return EXCEPTION_FOR_KIND[self.kind](self.detail)

    @classmethod
    def from_exception(cls, exc: CricketManagerException) -> "CoreError":
        return cls(exc.kind, exc.detail or str(exc) or exc.kind.value)

    def __str__(self) -> str:
        return f"{self.kind.value}: {self.detail}"


class Outcome(Generic[T]):
    """Success value or typed failure of an operation.

    Example:
        >>> outcome = Outcome.failure(ErrorKind.SELF_MATCH, "A team cannot play itself")
        >>> if not outcome:
        ...     print(outcome.error.kind.value)
        SelfMatch
    """

    __slots__ = ("value", "error")

    def __init__(self, value: Optional[T] = None, error: Optional[CoreError] = None):
        self.value = value
        self.error = error

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def kind(self) -> Optional[ErrorKind]:
        return self.error.kind if self.error else None

    def __bool__(self) -> bool:
        """Allow using the outcome in boolean context: if outcome: ..."""
        return self.ok

    def __repr__(self) -> str:
        if self.ok:
            return f"Outcome(OK, {self.value!r})"
        return f"Outcome(FAILED, {self.error!s})"

    def unwrap(self) -> T:
        """Return the value, raising the typed exception on failure."""
        if self.error is not None:
            raise self.error.to_exception()
        return self.value  # type: ignore[return-value]

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failure(cls, kind: ErrorKind, detail: str) -> "Outcome[T]":
        return cls(error=CoreError(kind, detail))

    @classmethod
    def from_error(cls, error: CoreError) -> "Outcome[T]":
        return cls(error=error)

    @classmethod
    def from_exception(cls, exc: CricketManagerException) -> "Outcome[T]":
        return cls(error=CoreError.from_exception(exc))
