"""In-memory authority for tests, the sandbox shell and the generator.

Behaves like the remote service the client talks to: it answers with wire
documents, assigns ids and versions, populates references on detail reads,
enforces capacity, ownership and stale-version checks, and runs the
password plus one-time-code login. Faults can be injected per call.
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

import asyncio
import copy
import hashlib
import random
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from cricketmanager.constants import (
    ACCOUNT_ADMIN,
    ACCOUNT_ORGANIZER,
    MATCH_SCHEDULED,
    MAX_WICKET_MARGIN,
    TOURNAMENT_UPCOMING,
)
from cricketmanager.exceptions import AuthorityException
from cricketmanager.models import ErrorKind
from cricketmanager.type_hints import Payload, Payloads
from cricketmanager.utils import setup_logger

logger = setup_logger(__name__)

TOURNAMENT_FIELDS = (
    "title",
    "banner1",
    "startDate",
    "endDate",
    "days",
    "maxTeams",
    "location",
    "prize",
    "rules",
    "status",
)
MATCH_FIELDS = ("status", "winner", "won_by_run", "won_by_wicket", "matchDate")
ACCOUNT_PRIVATE_FIELDS = ("passwordHash", "salt")


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt).encode()).hexdigest()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _new_id() -> str:
    return uuid.uuid4().hex


class InMemoryAuthority:
    """Reference implementation of the authority contract.

    Attributes
    ----------
    otp_required : bool
        When set, ``login`` answers with an OTP challenge and the session
        starts at ``verify_otp``; otherwise ``login`` returns the token.
    issued_otps : dict of str to str
        Outstanding one-time codes by email, readable by tests.
    calls : list of str
        Names of the contract methods called, in order.
    gate : asyncio.Event or None
        When set, every call waits for the event before touching state.
    """

    def __init__(self, otp_required: bool = True, seed: Optional[int] = None):
        self.otp_required = otp_required
        self.accounts: Dict[str, Dict[str, Any]] = {}
        self.tournaments: Dict[str, Dict[str, Any]] = {}
        self.teams: Dict[str, Dict[str, Any]] = {}
        self.matches: Dict[str, Dict[str, Any]] = {}
        self.sessions: Dict[str, str] = {}
        self.issued_otps: Dict[str, str] = {}
        self.calls: List[str] = []
        self.gate: Optional[asyncio.Event] = None
        self._failures: List[BaseException] = []
        self.random = random.Random(seed)

    # ========== Test hooks ==========

    def add_account(
        self,
        name: str,
        email: str,
        password: str,
        role: str = ACCOUNT_ORGANIZER,
        is_active: bool = True,
        phone: Optional[str] = None,
        city: Optional[str] = None,
    ) -> Payload:
        """Provision an account directly, e.g. the first administrator."""
        salt = _new_id()
        account = {
            "_id": _new_id(),
            "name": name,
            "email": email.lower(),
            "phone": phone,
            "role": role,
            "isActive": is_active,
            "city": city,
            "createdAt": _now(),
            "passwordHash": hash_password(password, salt),
            "salt": salt,
        }
        self.accounts[account["_id"]] = account
        return self._public_account(account)

    def issue_token(self, account_id: str) -> str:
        """Start a session without the login flow."""
        token = _new_id()
        self.sessions[token] = account_id
        return token

    def fail_next(self, failure: Union[int, BaseException], detail: str = "") -> None:
        """Make the next call fail with a status code or a raised exception."""
        if isinstance(failure, int):
            failure = AuthorityException(failure, detail or f"Injected {failure}")
        self._failures.append(failure)

    async def _enter(self, name: str) -> None:
        self.calls.append(name)
        if self.gate is not None:
            await self.gate.wait()
        else:
            await asyncio.sleep(0)
        if self._failures:
            failure = self._failures.pop(0)
            logger.debug(f"Injected failure for {name}: {failure!r}")
            raise failure

    # ========== Principals ==========

    def _principal(self, token: Optional[str]) -> Dict[str, Any]:
        account_id = self.sessions.get(token) if token else None
        if account_id is None or account_id not in self.accounts:
            raise AuthorityException(401, "Not authenticated")
        account = self.accounts[account_id]
        if not account["isActive"]:
            raise AuthorityException(403, "Account is deactivated")
        return account

    def _require_admin(self, token: Optional[str]) -> Dict[str, Any]:
        account = self._principal(token)
        if account["role"] != ACCOUNT_ADMIN:
            raise AuthorityException(403, "Administrator only")
        return account

    def _require_owner(self, token: Optional[str], tournament: Dict[str, Any]) -> Dict[str, Any]:
        account = self._principal(token)
        if account["role"] != ACCOUNT_ADMIN and tournament["organizer"] != account["_id"]:
            raise AuthorityException(403, "Not the organizer of this tournament")
        return account

    def _public_account(self, account: Dict[str, Any]) -> Payload:
        return {k: v for k, v in account.items() if k not in ACCOUNT_PRIVATE_FIELDS}

    # ========== Lookups and documents ==========

    def _get(self, collection: Dict[str, Dict[str, Any]], entity_id: str, label: str):
        if entity_id not in collection:
            raise AuthorityException(404, f"{label} {entity_id} not found")
        return collection[entity_id]

    def _tournament_doc(self, tournament: Dict[str, Any], populate: bool) -> Payload:
        doc = copy.deepcopy(tournament)
        if populate:
            doc["teams"] = [
                copy.deepcopy(self.teams[t]) for t in tournament["teams"] if t in self.teams
            ]
        return doc

    def _match_doc(self, match: Dict[str, Any]) -> Payload:
        doc = copy.deepcopy(match)
        for key in ("opponentX", "opponentY", "winner"):
            team_id = match.get(key)
            if team_id in self.teams:
                doc[key] = copy.deepcopy(self.teams[team_id])
        return doc

    def _bump(self, tournament: Dict[str, Any]) -> None:
        tournament["__v"] += 1

    # ========== Tournaments ==========

    async def create_tournament(self, token: Optional[str], payload: Payload) -> Payload:
        await self._enter("create_tournament")
        organizer = self._principal(token)
        if not payload.get("title") or not payload.get("banner1"):
            raise AuthorityException(400, "title and banner1 are required")
        if int(payload.get("maxTeams") or 0) < 1:
            raise AuthorityException(400, "maxTeams must be positive")

        tournament = {k: copy.deepcopy(payload.get(k)) for k in TOURNAMENT_FIELDS}
        tournament["status"] = tournament["status"] or TOURNAMENT_UPCOMING
        tournament.update(
            {
                "_id": _new_id(),
                "teams": [],
                "organizer": organizer["_id"],
                "__v": 0,
                "createdAt": _now(),
            }
        )
        self.tournaments[tournament["_id"]] = tournament
        return self._tournament_doc(tournament, populate=False)

    async def list_tournaments(self, token: Optional[str], scope: str = "all") -> Payloads:
        await self._enter("list_tournaments")
        tournaments = list(self.tournaments.values())
        if scope == "mine":
            account = self._principal(token)
            tournaments = [t for t in tournaments if t["organizer"] == account["_id"]]
        return [self._tournament_doc(t, populate=False) for t in tournaments]

    async def get_tournament(self, token: Optional[str], tournament_id: str) -> Payload:
        await self._enter("get_tournament")
        tournament = self._get(self.tournaments, tournament_id, "Tournament")
        return self._tournament_doc(tournament, populate=True)

    async def update_tournament(
        self, token: Optional[str], tournament_id: str, partial: Payload
    ) -> Payload:
        await self._enter("update_tournament")
        tournament = self._get(self.tournaments, tournament_id, "Tournament")
        self._require_owner(token, tournament)

        expected = partial.get("expectedVersion")
        if expected is not None and expected != tournament["__v"]:
            raise AuthorityException(
                409, f"Tournament changed since version {expected} (now {tournament['__v']})"
            )
        if "maxTeams" in partial and int(partial["maxTeams"]) < len(tournament["teams"]):
            raise AuthorityException(400, "maxTeams is lower than the registered teams")

        for key in TOURNAMENT_FIELDS:
            if key in partial:
                tournament[key] = copy.deepcopy(partial[key])
        self._bump(tournament)
        return self._tournament_doc(tournament, populate=True)

    # ========== Teams ==========

    async def create_team(self, token: Optional[str], payload: Payload) -> Payload:
        await self._enter("create_team")
        tournament = self._get(self.tournaments, payload.get("tournamentId"), "Tournament")
        self._require_owner(token, tournament)
        if len(tournament["teams"]) >= tournament["maxTeams"]:
            raise AuthorityException(
                400, "Tournament is full", kind=ErrorKind.CAPACITY_EXCEEDED
            )

        team = {
            "_id": _new_id(),
            "title": payload.get("title"),
            "banner": payload.get("banner"),
            "slogan": payload.get("slogan"),
            "tournament": tournament["_id"],
            "players": [],
            "paid": bool(payload.get("paid", False)),
            "createdAt": _now(),
        }
        self.teams[team["_id"]] = team
        tournament["teams"].append(team["_id"])
        self._bump(tournament)
        return copy.deepcopy(team)

    def _teams_of(self, account: Dict[str, Any]) -> List[Dict[str, Any]]:
        owned = {t["_id"] for t in self.tournaments.values() if t["organizer"] == account["_id"]}
        return [team for team in self.teams.values() if team["tournament"] in owned]

    async def list_teams(self, token: Optional[str], scope: str = "all") -> Payloads:
        await self._enter("list_teams")
        if scope == "mine":
            teams = self._teams_of(self._principal(token))
        else:
            teams = list(self.teams.values())
        return copy.deepcopy(teams)

    async def get_team(self, token: Optional[str], team_id: str) -> Payload:
        await self._enter("get_team")
        return copy.deepcopy(self._get(self.teams, team_id, "Team"))

    def _squad_owner(self, token: Optional[str], team_id: str) -> Dict[str, Any]:
        team = self._get(self.teams, team_id, "Team")
        self._require_owner(token, self._get(self.tournaments, team["tournament"], "Tournament"))
        return team

    def _new_players(self, players: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        created = []
        for player in players:
            if not str(player.get("name") or "").strip():
                raise AuthorityException(400, "Player name is required")
            created.append({**copy.deepcopy(player), "_id": _new_id()})
        return created

    async def add_players(
        self, token: Optional[str], team_id: str, players: List[Dict[str, Any]]
    ) -> Payload:
        await self._enter("add_players")
        team = self._squad_owner(token, team_id)
        team["players"].extend(self._new_players(players))
        return copy.deepcopy(team)

    async def replace_squad(
        self, token: Optional[str], team_id: str, players: List[Dict[str, Any]]
    ) -> Payload:
        await self._enter("replace_squad")
        team = self._squad_owner(token, team_id)
        team["players"] = self._new_players(players)
        return copy.deepcopy(team)

    async def delete_team(self, token: Optional[str], team_id: str) -> None:
        await self._enter("delete_team")
        self._require_admin(token)
        team = self.teams.pop(self._get(self.teams, team_id, "Team")["_id"])
        tournament = self.tournaments.get(team["tournament"])
        if tournament is not None and team_id in tournament["teams"]:
            tournament["teams"].remove(team_id)
            self._bump(tournament)

    # ========== Matches ==========

    async def create_match(self, token: Optional[str], payload: Payload) -> Payload:
        await self._enter("create_match")
        tournament = self._get(self.tournaments, payload.get("tournamentId"), "Tournament")
        self._require_owner(token, tournament)

        x_id, y_id = payload.get("opponentX"), payload.get("opponentY")
        if x_id == y_id:
            raise AuthorityException(400, "Opponents must differ", kind=ErrorKind.SELF_MATCH)
        for team_id in (x_id, y_id):
            if team_id not in tournament["teams"]:
                raise AuthorityException(
                    400,
                    f"Team {team_id} is not registered in this tournament",
                    kind=ErrorKind.INVALID_REFERENCE,
                )

        match = {
            "_id": _new_id(),
            "tournament": tournament["_id"],
            "opponentX": x_id,
            "opponentY": y_id,
            "matchDate": payload.get("matchDate"),
            "status": MATCH_SCHEDULED,
            "winner": None,
            "won_by_run": None,
            "won_by_wicket": None,
            "semifinal": bool(payload.get("semifinal", False)),
            "final": bool(payload.get("final", False)),
            "createdAt": _now(),
        }
        self.matches[match["_id"]] = match
        return self._match_doc(match)

    async def list_matches(
        self, token: Optional[str], tournament_id: Optional[str] = None
    ) -> Payloads:
        await self._enter("list_matches")
        return [
            self._match_doc(m)
            for m in self.matches.values()
            if tournament_id is None or m["tournament"] == tournament_id
        ]

    async def update_match(self, token: Optional[str], match_id: str, partial: Payload) -> Payload:
        await self._enter("update_match")
        match = self._get(self.matches, match_id, "Match")
        self._require_owner(token, self._get(self.tournaments, match["tournament"], "Tournament"))

        winner = partial.get("winner", match["winner"])
        if winner is not None and winner not in (match["opponentX"], match["opponentY"]):
            raise AuthorityException(
                400, "Winner did not play this match", kind=ErrorKind.INVALID_WINNER
            )
        wickets = partial.get("won_by_wicket")
        if wickets is not None and not 0 <= wickets <= MAX_WICKET_MARGIN:
            raise AuthorityException(400, "won_by_wicket out of range")

        for key in MATCH_FIELDS:
            if key in partial:
                match[key] = partial[key]
        return self._match_doc(match)

    # ========== Accounts ==========

    async def create_organizer(self, token: Optional[str], payload: Payload) -> Payload:
        await self._enter("create_organizer")
        self._require_admin(token)
        email = str(payload.get("email") or "").lower()
        if any(a["email"] == email for a in self.accounts.values()):
            raise AuthorityException(400, f"Email {email} is already registered")
        return self.add_account(
            name=payload.get("name"),
            email=email,
            password=payload.get("password"),
            phone=payload.get("phone"),
            city=payload.get("city"),
        )

    async def list_organizers(self, token: Optional[str]) -> Payloads:
        await self._enter("list_organizers")
        self._require_admin(token)
        return [
            self._public_account(a)
            for a in self.accounts.values()
            if a["role"] == ACCOUNT_ORGANIZER
        ]

    async def set_organizer_status(
        self, token: Optional[str], organizer_id: str, active: bool
    ) -> Payload:
        await self._enter("set_organizer_status")
        self._require_admin(token)
        account = self._get(self.accounts, organizer_id, "Organizer")
        account["isActive"] = bool(active)
        return self._public_account(account)

    # ========== Sessions ==========

    def _check_password(self, email: str, password: str) -> Dict[str, Any]:
        for account in self.accounts.values():
            if account["email"] == str(email).lower():
                if hash_password(password, account["salt"]) != account["passwordHash"]:
                    break
                if not account["isActive"]:
                    raise AuthorityException(403, "Account is deactivated")
                return account
        raise AuthorityException(401, "Invalid email or password")

    async def login(self, email: str, password: str) -> Payload:
        await self._enter("login")
        account = self._check_password(email, password)
        if not self.otp_required:
            return {
                "token": self.issue_token(account["_id"]),
                "user": self._public_account(account),
            }
        code = f"{self.random.randrange(10**6):06d}"
        self.issued_otps[account["email"]] = code
        return {"otpChallenge": "sent", "email": account["email"]}

    async def verify_otp(self, email: str, code: str) -> Payload:
        await self._enter("verify_otp")
        email = str(email).lower()
        if self.issued_otps.get(email) != code:
            raise AuthorityException(401, "Invalid or expired code")
        del self.issued_otps[email]
        account = next(a for a in self.accounts.values() if a["email"] == email)
        return {"token": self.issue_token(account["_id"]), "user": self._public_account(account)}

    async def logout(self, token: Optional[str]) -> None:
        await self._enter("logout")
        self.sessions.pop(token, None)
