"""Organizer and administrator accounts."""

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
from typing import Any, Dict, Optional

from cricketmanager.models.enums import AccountRole
from cricketmanager.models.refs import raw_id
from cricketmanager.utils.dates import parse_datetime


@dataclass
class Account:
    """A principal who can act on tournaments.

    The password never reaches this model: the authority does not return
    it after authentication and :meth:`from_dict` ignores it if it does.

    Attributes
    ----------
    id : str
        Authority-assigned id.
    name : str
        Full name.
    email : str
        Login email, unique across accounts.
    role : AccountRole
        ``organizer`` or ``admin``.
    is_active : bool
        Deactivated accounts keep their data but cannot act.
    phone : str or None
    city : str or None
    created_at : datetime or None
    """

    id: str
    name: str
    email: str
    role: AccountRole = AccountRole.ORGANIZER
    is_active: bool = True
    phone: Optional[str] = None
    city: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_admin(self) -> bool:
        return self.role == AccountRole.ADMIN

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "role": self.role.value,
            "isActive": self.is_active,
            "city": self.city,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Account":
        role = data.get("role") or AccountRole.ORGANIZER.value
        try:
            account_role = AccountRole(role)
        except ValueError:
            account_role = AccountRole.ORGANIZER
        return cls(
            id=raw_id(data) or "",
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            role=account_role,
            is_active=bool(data.get("isActive", True)),
            phone=data.get("phone"),
            city=data.get("city"),
            created_at=parse_datetime(data.get("createdAt")),
        )


# Glossary names for the two account roles
Organizer = Account
Administrator = Account
