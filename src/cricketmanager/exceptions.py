"""Exceptions for use in Cricket Manager"""

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

from typing import Dict, Optional, Type

from cricketmanager.models.enums import ErrorKind


# ========== Base Application Exception ==========


class CricketManagerException(Exception):
    """Base exception for all Cricket Manager errors.

    Every subclass names the :class:`ErrorKind` it stands for, so an
    exception caught anywhere in the core converts to a typed failure
    without a lookup table at the call site.
    """

    kind: ErrorKind = ErrorKind.VALIDATION_FAILED

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail


# ========== Validation Exceptions ==========


class ValidationException(CricketManagerException):
    """Raised when a required field is missing or malformed."""

    kind = ErrorKind.VALIDATION_FAILED


class EmailValidationException(ValidationException):
    """Raised when an email address is invalid."""

    pass


class PhoneValidationException(ValidationException):
    """Raised when a phone number is invalid."""

    pass


class InvalidTransitionException(ValidationException):
    """Raised when a status change is not allowed from the current state."""

    pass


# ========== Tournament Exceptions ==========


class CapacityExceededException(CricketManagerException):
    """Raised when a tournament already holds ``max_teams`` teams."""

    kind = ErrorKind.CAPACITY_EXCEEDED


class OwnershipViolationException(CricketManagerException):
    """Raised when the acting principal lacks rights over the target."""

    kind = ErrorKind.OWNERSHIP_VIOLATION


class InvalidReferenceException(CricketManagerException):
    """Raised when an id is dangling or points outside the expected owner."""

    kind = ErrorKind.INVALID_REFERENCE


# ========== Scheduling Exceptions ==========


class SchedulingException(CricketManagerException):
    """Base exception for fixture scheduling errors."""

    pass


class NoTeamsAvailableException(SchedulingException):
    """Raised when a tournament roster is empty."""

    kind = ErrorKind.NO_TEAMS_AVAILABLE


class SelfMatchException(SchedulingException):
    """Raised when both opponents are the same team."""

    kind = ErrorKind.SELF_MATCH


class InvalidWinnerException(SchedulingException):
    """Raised when a reported winner did not play the match."""

    kind = ErrorKind.INVALID_WINNER


class SlotConflictException(SchedulingException):
    """Raised when a team already has an open match at the same date/time."""

    kind = ErrorKind.SLOT_CONFLICT


# ========== Synchronization Exceptions ==========


class ConflictDetectedException(CricketManagerException):
    """Raised when the local cache is stale relative to the authority."""

    kind = ErrorKind.CONFLICT_DETECTED


class TransportFailureException(CricketManagerException):
    """Raised when the authority is unreachable or answers with a 5xx."""

    kind = ErrorKind.TRANSPORT_FAILURE


class AuthorityException(CricketManagerException):
    """Raised by an authority implementation when it rejects a call.

    Attributes
    ----------
    status_code : int or None
        HTTP-style status of the rejection, None when the authority could
        not be reached at all.
    explicit_kind : ErrorKind or None
        Kind named by the authority itself. When absent the kind is derived
        from ``status_code``.
    """

    def __init__(
        self,
        status_code: Optional[int],
        detail: str = "",
        kind: Optional[ErrorKind] = None,
    ) -> None:
        super().__init__(detail)
        self.status_code = status_code
        self.explicit_kind = kind

    @property
    def kind(self) -> ErrorKind:  # type: ignore[override]
        if self.explicit_kind is not None:
            return self.explicit_kind
        return kind_for_status(self.status_code)

    def __repr__(self) -> str:
        return f"AuthorityException({self.status_code!r}, {self.detail!r})"


def kind_for_status(status_code: Optional[int]) -> ErrorKind:
    """Map an authority status code to an error kind."""
    if status_code is None or status_code >= 500:
        return ErrorKind.TRANSPORT_FAILURE
    if status_code == 409:
        return ErrorKind.CONFLICT_DETECTED
    if status_code == 404:
        return ErrorKind.INVALID_REFERENCE
    if status_code in (401, 403):
        return ErrorKind.OWNERSHIP_VIOLATION
    return ErrorKind.VALIDATION_FAILED


EXCEPTION_FOR_KIND: Dict[ErrorKind, Type[CricketManagerException]] = {
    ErrorKind.VALIDATION_FAILED: ValidationException,
    ErrorKind.CAPACITY_EXCEEDED: CapacityExceededException,
    ErrorKind.OWNERSHIP_VIOLATION: OwnershipViolationException,
    ErrorKind.INVALID_REFERENCE: InvalidReferenceException,
    ErrorKind.NO_TEAMS_AVAILABLE: NoTeamsAvailableException,
    ErrorKind.SELF_MATCH: SelfMatchException,
    ErrorKind.INVALID_WINNER: InvalidWinnerException,
    ErrorKind.SLOT_CONFLICT: SlotConflictException,
    ErrorKind.CONFLICT_DETECTED: ConflictDetectedException,
    ErrorKind.TRANSPORT_FAILURE: TransportFailureException,
}
