"""Team data class."""

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

from dataclasses import dataclass, field
from datetime import datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from cricketmanager.models.player import Player
from cricketmanager.models.refs import Ref, raw_id
from cricketmanager.utils.dates import parse_datetime
from cricketmanager.utils.titles import sanitize_title

if TYPE_CHECKING:
    from cricketmanager.models.tournament import Tournament


@dataclass
class Team:
    """A team registered to exactly one tournament for its lifetime.

    Attributes
    ----------
    id : str
        Authority-assigned id.
    title : str
        Title as stored by the authority. May carry a corrupted prefix;
        use :attr:`display_name` for anything shown or compared.
    tournament : Ref[Tournament] or None
        Owning tournament. None only for malformed documents.
    players : list of Player
        Squad in display order.
    paid : bool
        Registration fee status.
    """

    id: str
    title: str
    tournament: Optional[Ref["Tournament"]] = None
    banner: Optional[str] = None
    slogan: Optional[str] = None
    players: List[Player] = field(default_factory=list)
    paid: bool = False
    created_at: Optional[datetime] = None

    @property
    def display_name(self) -> str:
        return sanitize_title(self.title)

    @property
    def tournament_id(self) -> Optional[str]:
        return self.tournament.id if self.tournament else None

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for ``createTeam``."""
        payload: Dict[str, Any] = {
            "title": self.title,
            "banner": self.banner,
            "tournamentId": self.tournament_id,
            "paid": self.paid,
        }
        if self.slogan:
            payload["slogan"] = self.slogan
        return payload

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "title": self.title,
            "banner": self.banner,
            "slogan": self.slogan,
            "tournament": self.tournament_id,
            "players": [p.to_dict() for p in self.players],
            "paid": self.paid,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Team":
        """Deserialize a team document; ``tournament`` may be populated."""
        from cricketmanager.models.tournament import Tournament

        tournament = data.get("tournament", data.get("tournamentId"))
        return cls(
            id=raw_id(data) or "",
            title=str(data.get("title") or ""),
            tournament=Ref.parse(tournament, Tournament.from_dict),
            banner=data.get("banner"),
            slogan=data.get("slogan"),
            players=[Player.from_dict(p) for p in data.get("players") or []],
            paid=bool(data.get("paid", False)),
            created_at=parse_datetime(data.get("createdAt")),
        )
