"""Invariant checks run before a mutation is sent to the authority.

Every check is a pure function of the proposed change and the best-known
state. Each returns an :class:`Outcome` whose value is the normalized input,
so callers send exactly what was checked.
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

from typing import Any, Dict, Iterable, List, Mapping, Optional

from cricketmanager.models import (
    Account,
    ErrorKind,
    Player,
    PlayerRole,
    Team,
    Tournament,
    TournamentStatus,
)
from cricketmanager.utils import setup_logger
from cricketmanager.utils.dates import parse_date, to_iso
from cricketmanager.utils.validation import (
    validate_amount,
    validate_date_range,
    validate_email,
    validate_name,
    validate_non_empty,
    validate_password,
    validate_phone,
    validate_pincode,
    validate_positive_integer,
)
from cricketmanager.validation.results import Outcome
from cricketmanager.validation.sanitize import PlayerLike, clean_squad

logger = setup_logger(__name__)

LOCATION_FIELDS = ("address", "city", "state", "pincode", "nearby")


def _invalid(detail: str) -> Outcome:
    return Outcome.failure(ErrorKind.VALIDATION_FAILED, detail)


# ========== Access ==========


def check_ownership(
    principal: Optional[Account], tournament: Tournament
) -> Outcome[Account]:
    """Allow administrators and the tournament's own organizer.

    Applies to the tournament itself and to every team nested in it.
    """
    denied = _check_active(principal)
    if denied is not None:
        return denied
    if principal.is_admin:
        return Outcome.success(principal)
    if tournament.organizer_id and tournament.organizer_id == principal.id:
        return Outcome.success(principal)
    return Outcome.failure(
        ErrorKind.OWNERSHIP_VIOLATION,
        f"{principal.name or principal.email} does not organize '{tournament.title}'",
    )


def check_admin(principal: Optional[Account], action: str = "This action") -> Outcome[Account]:
    """Allow administrators only."""
    denied = _check_active(principal)
    if denied is not None:
        return denied
    if not principal.is_admin:
        return Outcome.failure(
            ErrorKind.OWNERSHIP_VIOLATION, f"{action} requires an administrator"
        )
    return Outcome.success(principal)


def check_signed_in(principal: Optional[Account]) -> Outcome[Account]:
    denied = _check_active(principal)
    return denied if denied is not None else Outcome.success(principal)


def _check_active(principal: Optional[Account]) -> Optional[Outcome]:
    if principal is None:
        return Outcome.failure(ErrorKind.OWNERSHIP_VIOLATION, "Sign in first")
    if not principal.is_active:
        return Outcome.failure(
            ErrorKind.OWNERSHIP_VIOLATION, f"Account {principal.email} is deactivated"
        )
    return None


# ========== Tournaments ==========


def check_tournament_payload(data: Mapping[str, Any]) -> Outcome[Dict[str, Any]]:
    """Validate a full create-tournament form.

    Title, banner, both dates and ``maxTeams`` are required. Status
    defaults to ``upcoming``.
    """
    payload = dict(data)
    if not payload.get("banner1") and payload.get("banner"):
        payload["banner1"] = payload.pop("banner")

    if not payload.get("banner1"):
        return _invalid("Tournament banner is required")
    payload.setdefault("status", TournamentStatus.UPCOMING.value)
    payload.setdefault("rules", "")

    return _check_tournament_fields(payload, required=True)


def check_tournament_update(
    tournament: Tournament,
    changes: Mapping[str, Any],
    strict_status: bool = False,
) -> Outcome[Dict[str, Any]]:
    """Validate a field-level edit against the current tournament.

    Dates are checked against the stored counterpart when only one side
    changes. ``maxTeams`` cannot drop below the registered team count.
    """
    payload = dict(changes)
    for read_only in ("_id", "id", "teams", "organizer", "__v", "createdAt"):
        payload.pop(read_only, None)
    if "banner" in payload and "banner1" not in payload:
        payload["banner1"] = payload.pop("banner")
    if not payload:
        return _invalid("No changes to save")

    outcome = _check_tournament_fields(
        payload,
        required=False,
        current_start=tournament.start_date,
        current_end=tournament.end_date,
    )
    if not outcome:
        return outcome
    payload = outcome.value

    if "maxTeams" in payload and payload["maxTeams"] < len(tournament.teams):
        return _invalid(
            f"maxTeams cannot be lower than the {len(tournament.teams)} registered teams"
        )

    if "status" in payload:
        status_outcome = check_status_change(
            tournament.status, payload["status"], strict=strict_status
        )
        if not status_outcome:
            return status_outcome

    return Outcome.success(payload)


def check_status_change(
    current: Any, new: Any, strict: bool = False
) -> Outcome[TournamentStatus]:
    """Validate a tournament status change.

    Any known status may follow any other unless ``strict`` is set, in
    which case the series upcoming, open, ongoing, completed may only move
    forward.
    """
    try:
        target = TournamentStatus(new)
    except ValueError:
        return _invalid(f"Unknown tournament status: {new}")

    if strict:
        try:
            source = TournamentStatus(current)
        except ValueError:
            return Outcome.success(target)
        if target.rank < source.rank:
            return _invalid(
                f"Tournament status cannot move back from {source.value} to {target.value}"
            )
    return Outcome.success(target)


def _check_tournament_fields(
    payload: Dict[str, Any],
    required: bool,
    current_start=None,
    current_end=None,
) -> Outcome[Dict[str, Any]]:
    if required or "title" in payload:
        result = validate_non_empty(payload.get("title"), "Tournament title")
        if not result:
            return _invalid(result.error_message)
        payload["title"] = result.sanitized_value

    if required or "maxTeams" in payload:
        result = validate_positive_integer(payload.get("maxTeams"), "maxTeams")
        if not result:
            return _invalid(result.error_message)
        payload["maxTeams"] = result.sanitized_value

    if required or "startDate" in payload or "endDate" in payload:
        start = parse_date(payload["startDate"]) if "startDate" in payload else current_start
        end = parse_date(payload["endDate"]) if "endDate" in payload else current_end
        result = validate_date_range(start, end)
        if not result:
            return _invalid(result.error_message)
        if "startDate" in payload:
            payload["startDate"] = to_iso(start)
        if "endDate" in payload:
            payload["endDate"] = to_iso(end)
        payload["days"] = (end - start).days

    if "status" in payload:
        try:
            payload["status"] = TournamentStatus(payload["status"]).value
        except ValueError:
            return _invalid(f"Unknown tournament status: {payload['status']}")

    if "location" in payload:
        location = dict(payload.get("location") or {})
        unknown = set(location) - set(LOCATION_FIELDS)
        if unknown:
            return _invalid(f"Unknown location fields: {', '.join(sorted(unknown))}")
        result = validate_pincode(location.get("pincode"))
        if not result:
            return _invalid(result.error_message)
        location = {k: str(location.get(k) or "").strip() for k in LOCATION_FIELDS}
        location["pincode"] = result.sanitized_value or ""
        payload["location"] = location

    if required or "prize" in payload:
        prize = dict(payload.get("prize") or {})
        normalized = {}
        for key, label, needed in (
            ("firstPrize", "First prize", True),
            ("secondPrize", "Second prize", True),
            ("extraPrize", "Extra prize", False),
        ):
            result = validate_amount(prize.get(key), label, required=needed)
            if not result:
                return _invalid(result.error_message)
            if result.sanitized_value is not None:
                normalized[key] = result.sanitized_value
        payload["prize"] = normalized

    return Outcome.success(payload)


def check_capacity(tournament: Tournament) -> Outcome[Tournament]:
    """Fail with ``CapacityExceeded`` when the roster is already full."""
    if len(tournament.teams) >= tournament.max_teams:
        logger.info(
            f"Tournament {tournament.id} is full "
            f"({len(tournament.teams)}/{tournament.max_teams} teams)"
        )
        return Outcome.failure(
            ErrorKind.CAPACITY_EXCEEDED,
            f"'{tournament.title}' already has {len(tournament.teams)} of "
            f"{tournament.max_teams} teams",
        )
    return Outcome.success(tournament)


# ========== Teams and squads ==========


def check_team_payload(data: Mapping[str, Any]) -> Outcome[Dict[str, Any]]:
    """Validate a create-team form: title, banner and tournament are required."""
    payload = dict(data)

    result = validate_non_empty(payload.get("title"), "Team title")
    if not result:
        return _invalid(result.error_message)
    payload["title"] = result.sanitized_value

    if not payload.get("banner"):
        return _invalid("Team banner is required")

    tournament_id = payload.get("tournamentId") or payload.pop("tournament", None)
    if not tournament_id:
        return _invalid("A tournament must be selected")
    payload["tournamentId"] = str(tournament_id)

    slogan = payload.get("slogan")
    if slogan is not None and not str(slogan).strip():
        payload.pop("slogan")
    payload["paid"] = bool(payload.get("paid", False))
    return Outcome.success(payload)


def check_squad(
    players: Iterable[PlayerLike], require_named: bool = False
) -> Outcome[List[Player]]:
    """Strip blank rows and validate roles.

    Any count of named players is accepted, including zero, unless
    ``require_named`` is set (bulk add needs at least one).
    """
    squad = clean_squad(players)
    for player in squad:
        if not isinstance(player.role, PlayerRole):
            return _invalid(f"Unknown role '{player.role}' for {player.name}")
    if require_named and not squad:
        return _invalid("Enter at least one player name")
    return Outcome.success(squad)


def check_team_in_tournament(team: Team, tournament: Tournament) -> Outcome[Team]:
    if team.tournament_id != tournament.id:
        return Outcome.failure(
            ErrorKind.INVALID_REFERENCE,
            f"Team {team.display_name} does not belong to '{tournament.title}'",
        )
    return Outcome.success(team)


# ========== Accounts ==========


def check_organizer_payload(data: Mapping[str, Any]) -> Outcome[Dict[str, Any]]:
    """Validate a new organizer account created by an administrator."""
    payload = dict(data)

    result = validate_name(payload.get("name"))
    if not result:
        return _invalid(result.error_message)
    payload["name"] = result.sanitized_value

    result = validate_email(payload.get("email"), required=True)
    if not result:
        return _invalid(result.error_message)
    payload["email"] = result.sanitized_value

    result = validate_phone(payload.get("phone"), required=True)
    if not result:
        return _invalid(result.error_message)
    payload["phone"] = result.sanitized_value

    result = validate_password(payload.get("password"))
    if not result:
        return _invalid(result.error_message)

    city = payload.get("city")
    if city is not None:
        payload["city"] = str(city).strip() or None
    payload["role"] = "organizer"
    return Outcome.success(payload)
