"""A cricket player, always a member of some team's squad."""

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
from typing import Any, Dict, Optional, Union

from cricketmanager.models.enums import PlayerRole
from cricketmanager.models.refs import raw_id


@dataclass
class Player:
    """A squad member.

    Players have no natural key: two players may share a name. Only ``id``,
    assigned by the authority on persistence, identifies them.

    Attributes
    ----------
    name : str
        Display name. Blank names mark placeholder rows that are never
        persisted.
    role : PlayerRole or str
        Playing role. Unknown role names are kept as received so the
        validation pass can report them.
    image : str or None
        Opaque image URI.
    id : str or None
        Authority-assigned id, None until saved.
    """

    name: str
    role: Union[PlayerRole, str] = PlayerRole.BATSMAN
    image: Optional[str] = None
    id: Optional[str] = None

    @property
    def is_blank(self) -> bool:
        return not (self.name or "").strip()

    @property
    def role_name(self) -> str:
        return self.role.value if isinstance(self.role, PlayerRole) else str(self.role)

    def to_payload(self) -> Dict[str, Any]:
        """Serialize for a squad write. The id is never sent."""
        payload: Dict[str, Any] = {"name": self.name, "role": self.role_name}
        if self.image:
            payload["image"] = self.image
        return payload

    def to_dict(self) -> Dict[str, Any]:
        data = self.to_payload()
        if self.id:
            data["_id"] = self.id
        return data

    @classmethod
    def from_dict(cls, data: Union[Dict[str, Any], str]) -> "Player":
        """Build a player from a wire document. A bare string is a name."""
        if isinstance(data, str):
            return cls(name=data)
        role = PlayerRole.parse(data.get("role"))
        return cls(
            name=str(data.get("name") or ""),
            role=role if role is not None else str(data.get("role")),
            image=data.get("image"),
            id=raw_id(data),
        )
