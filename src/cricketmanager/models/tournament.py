"""Tournament data classes."""

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
from datetime import date, datetime
from typing import TYPE_CHECKING, Any, Dict, List, Optional, Union

from cricketmanager.models.account import Account
from cricketmanager.models.enums import TournamentStatus
from cricketmanager.models.refs import Ref, raw_id, ref_ids
from cricketmanager.utils.dates import parse_date, parse_datetime, to_iso
from cricketmanager.utils.numbers import coerce_int

if TYPE_CHECKING:
    from cricketmanager.models.team import Team


@dataclass
class Location:
    """Venue address of a tournament."""

    address: str = ""
    city: str = ""
    state: str = ""
    pincode: str = ""
    nearby: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": self.address,
            "city": self.city,
            "state": self.state,
            "pincode": self.pincode,
            "nearby": self.nearby,
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Location":
        data = data if isinstance(data, dict) else {}
        return cls(
            address=str(data.get("address") or ""),
            city=str(data.get("city") or ""),
            state=str(data.get("state") or ""),
            pincode=str(data.get("pincode") or ""),
            nearby=str(data.get("nearby") or data.get("venue") or ""),
        )


@dataclass
class Prize:
    """Prize money in whole rupees. No formatting happens in the core."""

    first_prize: int = 0
    second_prize: int = 0
    extra_prize: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "firstPrize": self.first_prize,
            "secondPrize": self.second_prize,
        }
        if self.extra_prize is not None:
            data["extraPrize"] = self.extra_prize
        return data

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "Prize":
        data = data if isinstance(data, dict) else {}
        extra = data.get("extraPrize")
        return cls(
            first_prize=coerce_int(data.get("firstPrize"), 0, "firstPrize"),
            second_prize=coerce_int(data.get("secondPrize"), 0, "secondPrize"),
            extra_prize=coerce_int(extra, None, "extraPrize"),
        )


@dataclass
class Tournament:
    """A tournament and its roster.

    Attributes
    ----------
    id : str
        Authority-assigned id.
    title : str
        Display title, never empty once persisted.
    max_teams : int
        Roster capacity. ``len(teams) <= max_teams`` always holds.
    start_date, end_date : date or None
        Inclusive playing window, ``start_date <= end_date``.
    status : TournamentStatus or str
        Display status. Unknown values are kept as received.
    teams : list of Ref[Team]
        Registered teams in registration order, no duplicates.
    organizer : Ref[Account] or None
        Owning organizer.
    version : int
        Authority revision counter, used to detect stale writes.
    """

    id: str
    title: str
    max_teams: int
    banner: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    location: Location = field(default_factory=Location)
    prize: Prize = field(default_factory=Prize)
    rules: str = ""
    status: Union[TournamentStatus, str] = TournamentStatus.UPCOMING
    teams: List[Ref["Team"]] = field(default_factory=list)
    organizer: Optional[Ref[Account]] = None
    version: int = 0
    created_at: Optional[datetime] = None

    # ========== Derived values ==========

    @property
    def team_ids(self) -> List[str]:
        return ref_ids(self.teams)

    @property
    def open_slots(self) -> int:
        return max(0, self.max_teams - len(self.teams))

    @property
    def is_full(self) -> bool:
        return len(self.teams) >= self.max_teams

    @property
    def days(self) -> Optional[int]:
        """Whole days between start and end."""
        if self.start_date is None or self.end_date is None:
            return None
        return (self.end_date - self.start_date).days

    @property
    def status_name(self) -> str:
        if isinstance(self.status, TournamentStatus):
            return self.status.value
        return str(self.status)

    @property
    def organizer_id(self) -> Optional[str]:
        return self.organizer.id if self.organizer else None

    def has_team(self, team_id: str) -> bool:
        return team_id in self.team_ids

    # ========== Serialization ==========

    def to_payload(self) -> Dict[str, Any]:
        """Serialize the writable fields for a create/update call."""
        return {
            "title": self.title,
            "banner1": self.banner,
            "startDate": to_iso(self.start_date),
            "endDate": to_iso(self.end_date),
            "days": self.days,
            "maxTeams": self.max_teams,
            "location": self.location.to_dict(),
            "prize": self.prize.to_dict(),
            "rules": self.rules,
            "status": self.status_name,
        }

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_payload()
        data.update(
            {
                "_id": self.id,
                "teams": self.team_ids,
                "organizer": self.organizer_id,
                "__v": self.version,
                "createdAt": self.created_at.isoformat() if self.created_at else None,
            }
        )
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Tournament":
        """Deserialize a tournament document.

        ``teams`` and ``organizer`` may each be bare ids or populated
        documents.
        """
        from cricketmanager.models.team import Team

        raw_status = data.get("status") or TournamentStatus.UPCOMING.value
        try:
            status: Union[TournamentStatus, str] = TournamentStatus(raw_status)
        except ValueError:
            status = str(raw_status)

        organizer = data.get("organizer", data.get("createdBy"))

        return cls(
            id=raw_id(data) or "",
            title=str(data.get("title") or ""),
            max_teams=coerce_int(data.get("maxTeams"), 0, "maxTeams"),
            banner=data.get("banner1", data.get("banner")),
            start_date=parse_date(data.get("startDate")),
            end_date=parse_date(data.get("endDate")),
            location=Location.from_dict(data.get("location")),
            prize=Prize.from_dict(data.get("prize")),
            rules=str(data.get("rules") or ""),
            status=status,
            teams=Ref.parse_many(data.get("teams"), Team.from_dict),
            organizer=Ref.parse(organizer, Account.from_dict),
            version=coerce_int(data.get("__v"), 0, "__v"),
            created_at=parse_datetime(data.get("createdAt")),
        )
