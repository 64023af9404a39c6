"""Contract of the remote authority.

The authority owns the durable state. Every method is a coroutine that
returns raw wire documents (camelCase keys, ``_id`` identifiers, foreign
keys as bare ids or populated documents) and raises
:class:`~cricketmanager.exceptions.AuthorityException` when it rejects a
call. Transport errors (``ConnectionError``, ``TimeoutError``, ``OSError``)
may escape as they are; the sync client maps them to ``TransportFailure``.
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

from typing import Any, Dict, List, Optional, Protocol, runtime_checkable

from cricketmanager.type_hints import Payload, Payloads, Scope


@runtime_checkable
class Authority(Protocol):
    """Remote collaborator consumed by :class:`~cricketmanager.sync.CricketSync`.

    ``token`` identifies the session; the authority resolves the acting
    principal from it. ``scope="mine"`` restricts listings to the
    principal's own tournaments (and their teams).
    """

    # ----- tournaments -----

    async def create_tournament(self, token: Optional[str], payload: Payload) -> Payload: ...

    async def list_tournaments(self, token: Optional[str], scope: Scope = "all") -> Payloads: ...

    async def get_tournament(self, token: Optional[str], tournament_id: str) -> Payload:
        """Return the tournament with its ``teams`` populated."""
        ...

    async def update_tournament(
        self, token: Optional[str], tournament_id: str, partial: Payload
    ) -> Payload:
        """Apply a partial update.

        When ``partial`` carries ``expectedVersion`` and the stored ``__v``
        differs, the authority answers 409.
        """
        ...

    # ----- teams -----

    async def create_team(self, token: Optional[str], payload: Payload) -> Payload: ...

    async def list_teams(self, token: Optional[str], scope: Scope = "all") -> Payloads: ...

    async def get_team(self, token: Optional[str], team_id: str) -> Payload: ...

    async def add_players(
        self, token: Optional[str], team_id: str, players: List[Dict[str, Any]]
    ) -> Payload: ...

    async def replace_squad(
        self, token: Optional[str], team_id: str, players: List[Dict[str, Any]]
    ) -> Payload: ...

    async def delete_team(self, token: Optional[str], team_id: str) -> None:
        """Delete a team and remove it from its tournament. Admin only."""
        ...

    # ----- matches -----

    async def create_match(self, token: Optional[str], payload: Payload) -> Payload: ...

    async def list_matches(
        self, token: Optional[str], tournament_id: Optional[str] = None
    ) -> Payloads: ...

    async def update_match(
        self, token: Optional[str], match_id: str, partial: Payload
    ) -> Payload: ...

    # ----- accounts -----

    async def create_organizer(self, token: Optional[str], payload: Payload) -> Payload: ...

    async def list_organizers(self, token: Optional[str]) -> Payloads: ...

    async def set_organizer_status(
        self, token: Optional[str], organizer_id: str, active: bool
    ) -> Payload:
        """Activate or deactivate an organizer, sent as ``{"status": ...}``."""
        ...

    # ----- sessions -----

    async def login(self, email: str, password: str) -> Payload:
        """Return ``{"token": ...}`` or ``{"otpChallenge": ...}``."""
        ...

    async def verify_otp(self, email: str, code: str) -> Payload:
        """Return ``{"token": ..., "user": {...}}``."""
        ...

    async def logout(self, token: Optional[str]) -> None: ...
