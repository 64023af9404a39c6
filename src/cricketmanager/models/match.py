"""Match data class."""

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
from typing import Any, Dict, Optional, Tuple

from cricketmanager.constants import OPEN_MATCH_STATUSES
from cricketmanager.models.enums import MatchStatus
from cricketmanager.models.refs import Ref, raw_id
from cricketmanager.models.team import Team
from cricketmanager.models.tournament import Tournament
from cricketmanager.utils.dates import parse_datetime
from cricketmanager.utils.numbers import coerce_int


@dataclass
class Match:
    """A fixture between two teams of the same tournament.

    Attributes
    ----------
    id : str
        Authority-assigned id.
    tournament : Ref[Tournament]
        Tournament both opponents belong to.
    opponent_x, opponent_y : Ref[Team]
        The two distinct opponents.
    match_date : datetime or None
        Scheduled date/time slot.
    status : MatchStatus
        ``scheduled`` until started, then ``live``; ``completed`` and
        ``abandoned`` are terminal.
    winner : Ref[Team] or None
        One of the opponents once a result is recorded.
    won_by_run, won_by_wicket : int or None
        Result margin, at most one of them set.
    semifinal, final : bool
        Stage flags used for display, a league match otherwise.
    """

    id: str
    tournament: Ref[Tournament]
    opponent_x: Ref[Team]
    opponent_y: Ref[Team]
    match_date: Optional[datetime] = None
    status: MatchStatus = MatchStatus.SCHEDULED
    winner: Optional[Ref[Team]] = None
    won_by_run: Optional[int] = None
    won_by_wicket: Optional[int] = None
    semifinal: bool = False
    final: bool = False
    created_at: Optional[datetime] = None

    @property
    def tournament_id(self) -> str:
        return self.tournament.id

    @property
    def team_ids(self) -> Tuple[str, str]:
        return (self.opponent_x.id, self.opponent_y.id)

    @property
    def winner_id(self) -> Optional[str]:
        return self.winner.id if self.winner else None

    @property
    def is_open(self) -> bool:
        """Whether the match still occupies its slot."""
        return self.status.value in OPEN_MATCH_STATUSES

    def involves(self, team_id: str) -> bool:
        return team_id in self.team_ids

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "tournament": self.tournament_id,
            "opponentX": self.opponent_x.id,
            "opponentY": self.opponent_y.id,
            "matchDate": self.match_date.isoformat() if self.match_date else None,
            "status": self.status.value,
            "winner": self.winner_id,
            "won_by_run": self.won_by_run,
            "won_by_wicket": self.won_by_wicket,
            "semifinal": self.semifinal,
            "final": self.final,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Match":
        """Deserialize a match document.

        ``tournament``, ``opponentX``, ``opponentY`` and ``winner`` may each
        be bare ids or populated documents.
        """
        try:
            status = MatchStatus(data.get("status") or MatchStatus.SCHEDULED.value)
        except ValueError:
            status = MatchStatus.SCHEDULED

        tournament = Ref.parse(
            data.get("tournament", data.get("tournamentId")), Tournament.from_dict
        )
        opponent_x = Ref.parse(data.get("opponentX"), Team.from_dict)
        opponent_y = Ref.parse(data.get("opponentY"), Team.from_dict)

        return cls(
            id=raw_id(data) or "",
            tournament=tournament or Ref(""),
            opponent_x=opponent_x or Ref(""),
            opponent_y=opponent_y or Ref(""),
            match_date=parse_datetime(data.get("matchDate")),
            status=status,
            winner=Ref.parse(data.get("winner"), Team.from_dict),
            won_by_run=coerce_int(data.get("won_by_run"), None, "won_by_run"),
            won_by_wicket=coerce_int(data.get("won_by_wicket"), None, "won_by_wicket"),
            semifinal=bool(data.get("semifinal", False)),
            final=bool(data.get("final", False)),
            created_at=parse_datetime(data.get("createdAt")),
        )
