"""Enumerations shared by the domain model."""

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

from enum import Enum
from typing import Optional

from cricketmanager import constants


class TournamentStatus(str, Enum):
    """Display status of a tournament. Free-form unless strict mode is on."""

    UPCOMING = constants.TOURNAMENT_UPCOMING
    OPEN = constants.TOURNAMENT_OPEN
    ONGOING = constants.TOURNAMENT_ONGOING
    COMPLETED = constants.TOURNAMENT_COMPLETED

    @property
    def rank(self) -> int:
        return constants.TOURNAMENT_STATUS_RANK[self.value]


class MatchStatus(str, Enum):
    """Lifecycle state of a match."""

    SCHEDULED = constants.MATCH_SCHEDULED
    LIVE = constants.MATCH_LIVE
    COMPLETED = constants.MATCH_COMPLETED
    ABANDONED = constants.MATCH_ABANDONED

    @property
    def is_terminal(self) -> bool:
        return not constants.MATCH_TRANSITIONS[self.value]

    def can_become(self, other: "MatchStatus") -> bool:
        return other.value in constants.MATCH_TRANSITIONS[self.value]


class PlayerRole(str, Enum):
    BATSMAN = constants.ROLE_BATSMAN
    BALLER = constants.ROLE_BALLER
    KEEPER = constants.ROLE_KEEPER
    ALL_ROUNDER = constants.ROLE_ALL_ROUNDER
    CAPTAIN = constants.ROLE_CAPTAIN

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["PlayerRole"]:
        """Parse a role name, accepting common aliases such as ``bowler``.

        Returns None for unknown names; empty input means the default role.
        """
        if value is None or not str(value).strip():
            return cls(constants.DEFAULT_PLAYER_ROLE)
        name = str(value).strip().lower()
        name = constants.PLAYER_ROLE_ALIASES.get(name, name)
        try:
            return cls(name)
        except ValueError:
            return None


class AccountRole(str, Enum):
    ORGANIZER = constants.ACCOUNT_ORGANIZER
    ADMIN = constants.ACCOUNT_ADMIN


class ErrorKind(str, Enum):
    """Kinds of failure surfaced across the public boundary."""

    VALIDATION_FAILED = "ValidationFailed"
    CAPACITY_EXCEEDED = "CapacityExceeded"
    OWNERSHIP_VIOLATION = "OwnershipViolation"
    INVALID_REFERENCE = "InvalidReference"
    NO_TEAMS_AVAILABLE = "NoTeamsAvailable"
    SELF_MATCH = "SelfMatch"
    INVALID_WINNER = "InvalidWinner"
    SLOT_CONFLICT = "SlotConflict"
    CONFLICT_DETECTED = "ConflictDetected"
    TRANSPORT_FAILURE = "TransportFailure"

    @property
    def is_retryable(self) -> bool:
        """Whether the caller may retry without new user input.

        Conflicts need a refetch before the retry.
        """
        return self in (ErrorKind.CONFLICT_DETECTED, ErrorKind.TRANSPORT_FAILURE)
