"""Result recording and validation for matches.

This module checks reported results before they are sent to the authority.
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
from typing import Any, Dict, Optional

from cricketmanager.constants import MAX_WICKET_MARGIN
from cricketmanager.models import ErrorKind, Match, MatchStatus, raw_id
from cricketmanager.utils import setup_logger
from cricketmanager.validation.results import Outcome

logger = setup_logger(__name__)


@dataclass
class MatchResult:
    """A validated match result.

    Attributes
    ----------
    match_id : str
        ID of the match
    winner_id : str
        ID of the winning team, one of the two opponents
    won_by_run : int or None
        Margin in runs when the side batting first won
    won_by_wicket : int or None
        Margin in wickets when the chasing side won
    """

    match_id: str
    winner_id: str
    won_by_run: Optional[int] = None
    won_by_wicket: Optional[int] = None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize as an ``updateMatch`` partial."""
        return {
            "status": MatchStatus.COMPLETED.value,
            "winner": self.winner_id,
            "won_by_run": self.won_by_run,
            "won_by_wicket": self.won_by_wicket,
        }


class ResultRecorder:
    """Handles validating match results.

    This class is responsible for:
    - Ensuring the winner is one of the two opponents
    - Validating the margin
    - Refusing results for matches that are already final
    """

    def validate_result(
        self,
        match: Match,
        winner: Any,
        won_by_run: Optional[int] = None,
        won_by_wicket: Optional[int] = None,
    ) -> Outcome[MatchResult]:
        """Validate a result before it is reported.

        Args:
            match: The match as currently known
            winner: Winning team id, document, Ref or Team
            won_by_run: Run margin, if any
            won_by_wicket: Wicket margin, if any

        Returns:
            Outcome holding the MatchResult, or an InvalidWinner or
            ValidationFailed failure
        """
        winner_id = raw_id(winner)
        if winner_id is None or winner_id not in match.team_ids:
            logger.warning(
                f"Rejected winner {winner_id} for match {match.id}: "
                f"opponents are {match.team_ids}"
            )
            return Outcome.failure(
                ErrorKind.INVALID_WINNER,
                f"Winner must be one of the two teams in match {match.id}",
            )

        if won_by_run is not None and won_by_wicket is not None:
            return Outcome.failure(
                ErrorKind.VALIDATION_FAILED,
                "A match is won either by runs or by wickets, not both",
            )

        margin_error = self._validate_margin(won_by_run, won_by_wicket)
        if margin_error is not None:
            return Outcome.failure(ErrorKind.VALIDATION_FAILED, margin_error)

        if not match.status.can_become(MatchStatus.COMPLETED):
            return Outcome.failure(
                ErrorKind.VALIDATION_FAILED,
                f"Match {match.id} is already {match.status.value}",
            )

        return Outcome.success(
            MatchResult(
                match_id=match.id,
                winner_id=winner_id,
                won_by_run=won_by_run,
                won_by_wicket=won_by_wicket,
            )
        )

    def _validate_margin(
        self, won_by_run: Optional[int], won_by_wicket: Optional[int]
    ) -> Optional[str]:
        """Return an error message for an invalid margin, None if valid."""
        if won_by_run is not None:
            if isinstance(won_by_run, bool) or not isinstance(won_by_run, int):
                return f"Run margin must be a whole number: {won_by_run}"
            if won_by_run < 0:
                return f"Run margin cannot be negative: {won_by_run}"

        if won_by_wicket is not None:
            if isinstance(won_by_wicket, bool) or not isinstance(won_by_wicket, int):
                return f"Wicket margin must be a whole number: {won_by_wicket}"
            if not (0 <= won_by_wicket <= MAX_WICKET_MARGIN):
                return (
                    f"Wicket margin must be between 0 and {MAX_WICKET_MARGIN}: "
                    f"{won_by_wicket}"
                )

        return None
