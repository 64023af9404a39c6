"""Fixture scheduling for tournaments.

This module validates proposed fixtures against a tournament's roster and
its already-scheduled matches, suggests pairings, and guards match status
transitions.
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
from datetime import datetime
from itertools import combinations
from typing import Any, Dict, Iterable, List, Optional

from cricketmanager.controllers.scheduling.pairing_history import PairingHistory
from cricketmanager.models import ErrorKind, Match, MatchStatus, Tournament, raw_id
from cricketmanager.type_hints import Fixture
from cricketmanager.utils import setup_logger
from cricketmanager.utils.dates import parse_datetime
from cricketmanager.validation.results import Outcome

logger = setup_logger(__name__)


@dataclass
class FixtureRequest:
    """A validated fixture, ready to send as ``createMatch``."""

    tournament_id: str
    opponent_x: str
    opponent_y: str
    match_date: datetime
    semifinal: bool = False
    final: bool = False

    def to_payload(self) -> Dict[str, Any]:
        return {
            "tournamentId": self.tournament_id,
            "opponentX": self.opponent_x,
            "opponentY": self.opponent_y,
            "matchDate": self.match_date.isoformat(),
            "semifinal": self.semifinal,
            "final": self.final,
        }


class MatchScheduler:
    """Validates fixtures and status changes for a tournament's matches.

    This class is responsible for:
    - Rejecting fixtures between a team and itself
    - Rejecting opponents outside the tournament's current roster
    - Detecting slot conflicts for teams already booked at the same time
    - Proposing pairings that have not been played yet

    The scheduler holds no state of its own; every call receives the
    roster and matches it should reason about, in the order the authority
    returned them.
    """

    def __init__(self, enforce_slot_conflicts: bool = True):
        """Initialize the scheduler.

        Args:
            enforce_slot_conflicts: Reject a fixture when either team already
                has a scheduled or live match at the same date/time
        """
        self.enforce_slot_conflicts = enforce_slot_conflicts

    def validate_fixture(
        self,
        tournament: Tournament,
        matches: Iterable[Match],
        opponent_x: Any,
        opponent_y: Any,
        match_date: Any,
        semifinal: bool = False,
        final: bool = False,
    ) -> Outcome[FixtureRequest]:
        """Check a proposed fixture.

        Args:
            tournament: Tournament with its current roster
            matches: Matches already known for the tournament
            opponent_x: Team id, document, Ref or Team
            opponent_y: Team id, document, Ref or Team
            match_date: Date/time slot, datetime or ISO string

        Returns:
            Outcome holding the FixtureRequest, or a SelfMatch,
            NoTeamsAvailable, InvalidReference, ValidationFailed or
            SlotConflict failure
        """
        x_id = raw_id(opponent_x)
        y_id = raw_id(opponent_y)

        if x_id is not None and x_id == y_id:
            return Outcome.failure(ErrorKind.SELF_MATCH, "A team cannot play against itself")

        if not tournament.teams:
            return Outcome.failure(
                ErrorKind.NO_TEAMS_AVAILABLE,
                f"'{tournament.title}' has no registered teams",
            )

        if x_id is None or y_id is None:
            return Outcome.failure(ErrorKind.VALIDATION_FAILED, "Select both teams")

        roster = set(tournament.team_ids)
        for team_id in (x_id, y_id):
            if team_id not in roster:
                return Outcome.failure(
                    ErrorKind.INVALID_REFERENCE,
                    f"Team {team_id} is not registered in '{tournament.title}'",
                )

        slot = parse_datetime(match_date)
        if slot is None:
            return Outcome.failure(ErrorKind.VALIDATION_FAILED, "Select a match date")

        if self.enforce_slot_conflicts:
            history = PairingHistory.from_matches(matches)
            for team_id in (x_id, y_id):
                if history.slot_taken(team_id, slot):
                    logger.info(
                        f"Slot conflict for team {team_id} at {slot.isoformat()}"
                    )
                    return Outcome.failure(
                        ErrorKind.SLOT_CONFLICT,
                        f"Team {self._team_name(tournament, team_id)} already plays "
                        f"at {slot.isoformat()}",
                    )

        return Outcome.success(
            FixtureRequest(
                tournament_id=tournament.id,
                opponent_x=x_id,
                opponent_y=y_id,
                match_date=slot,
                semifinal=bool(semifinal),
                final=bool(final),
            )
        )

    def propose_pairings(
        self,
        tournament: Tournament,
        matches: Iterable[Match],
        limit: Optional[int] = None,
    ) -> Outcome[List[Fixture]]:
        """Suggest one round of fixtures between teams that have not met.

        Pairs with the fewest previous meetings come first, then pairs whose
        teams have played the fewest matches, then roster order. Each team
        appears at most once, and pairs with a pending match are skipped.

        Args:
            tournament: Tournament with its current roster
            matches: Matches already known for the tournament
            limit: Maximum number of fixtures to return

        Returns:
            Outcome holding (opponent_x_id, opponent_y_id) pairs
        """
        team_ids = tournament.team_ids
        if not team_ids:
            return Outcome.failure(
                ErrorKind.NO_TEAMS_AVAILABLE,
                f"'{tournament.title}' has no registered teams",
            )

        history = PairingHistory.from_matches(matches)
        position = {team_id: index for index, team_id in enumerate(team_ids)}

        candidates = [
            (x, y)
            for x, y in combinations(team_ids, 2)
            if not history.has_open_fixture(x, y)
        ]
        candidates.sort(
            key=lambda pair: (
                history.meeting_count(*pair),
                history.matches_played[pair[0]] + history.matches_played[pair[1]],
                position[pair[0]],
                position[pair[1]],
            )
        )

        proposals: List[Fixture] = []
        booked = set()
        for x, y in candidates:
            if limit is not None and len(proposals) >= limit:
                break
            if x in booked or y in booked:
                continue
            proposals.append((x, y))
            booked.update((x, y))

        logger.debug(
            f"Proposed {len(proposals)} fixtures for tournament {tournament.id}"
        )
        return Outcome.success(proposals)

    def check_transition(self, match: Match, target: Any) -> Outcome[MatchStatus]:
        """Validate a status change for a match.

        ``scheduled`` may become ``live``, ``completed`` or ``abandoned``;
        ``live`` may become ``completed`` or ``abandoned``. Completed and
        abandoned matches are final.
        """
        try:
            new_status = MatchStatus(target)
        except ValueError:
            return Outcome.failure(
                ErrorKind.VALIDATION_FAILED, f"Unknown match status: {target}"
            )

        if not match.status.can_become(new_status):
            return Outcome.failure(
                ErrorKind.VALIDATION_FAILED,
                f"Match cannot move from {match.status.value} to {new_status.value}",
            )
        return Outcome.success(new_status)

    def _team_name(self, tournament: Tournament, team_id: str) -> str:
        for ref in tournament.teams:
            if ref.id == team_id and ref.value is not None:
                return ref.value.display_name
        return team_id
