"""Cleansing of data received from the authority and of squads before a save.

The authority may already hold malformed records: titles with a corrupted
prefix, blank squad rows, winners that did not play. Everything fetched goes
through these functions before it reaches the cache.
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

from dataclasses import replace
from typing import Any, Iterable, List, Mapping, Optional, Union

from cricketmanager.constants import (
    DEFAULT_SQUAD_SLOTS,
    MISSING_TEAM_PLACEHOLDER,
    TEAM_PLACEHOLDER,
)
from cricketmanager.models import Match, Player, PlayerRole, Ref, Team, Tournament
from cricketmanager.utils import setup_logger
from cricketmanager.utils.titles import sanitize_title

logger = setup_logger(__name__)

PlayerLike = Union[Player, Mapping[str, Any], str]


def to_player(entry: PlayerLike) -> Player:
    """Accept a Player, a ``{"name", "role"}`` mapping or a bare name."""
    if isinstance(entry, Player):
        return entry
    if isinstance(entry, str):
        return Player(name=entry)
    return Player.from_dict(dict(entry))


def clean_squad(players: Iterable[PlayerLike]) -> List[Player]:
    """Drop blank rows and normalize the rest, preserving order.

    Names lose any corrupted prefix up to the last ``}`` and are trimmed;
    a row with nothing left is dropped. Role aliases are resolved. Unknown
    roles are kept as received; :func:`check_squad` reports them.
    """
    cleaned = []
    for entry in players:
        player = to_player(entry)
        name = sanitize_title(player.name, placeholder="", missing="")
        if not name:
            continue
        if name != player.name.strip():
            logger.debug(f"Sanitized player name {player.name!r} -> {name!r}")
        role = player.role
        if not isinstance(role, PlayerRole):
            role = PlayerRole.parse(role) or role
        cleaned.append(replace(player, name=name, role=role))
    return cleaned


def squad_slots(team: Optional[Team], slots: int = DEFAULT_SQUAD_SLOTS) -> List[Player]:
    """Current squad padded with blank rows up to ``slots`` entries.

    Editors start from this list; blank rows are dropped again on save.
    """
    players = list(team.players) if team is not None else []
    padding = max(0, slots - len(players))
    return players + [Player(name="") for _ in range(padding)]


def cleanse_team(
    team: Team,
    placeholder: str = TEAM_PLACEHOLDER,
    missing: str = MISSING_TEAM_PLACEHOLDER,
) -> Team:
    """Return the team with a sanitized title and no blank squad rows."""
    title = sanitize_title(team.title, placeholder, missing)
    if title != team.title:
        logger.debug(f"Sanitized team title {team.title!r} -> {title!r}")
    return replace(team, title=title, players=clean_squad(team.players))


def _cleanse_team_ref(ref: Optional[Ref[Team]], *titles: str) -> Optional[Ref[Team]]:
    if ref is None or ref.value is None:
        return ref
    return Ref(ref.id, cleanse_team(ref.value, *titles))


def cleanse_tournament(
    tournament: Tournament,
    placeholder: str = TEAM_PLACEHOLDER,
    missing: str = MISSING_TEAM_PLACEHOLDER,
) -> Tournament:
    """Sanitize populated roster entries and trim the title."""
    teams = [_cleanse_team_ref(ref, placeholder, missing) for ref in tournament.teams]
    if len(teams) > tournament.max_teams > 0:
        # Keep what the authority sent; only report the broken invariant
        logger.warning(
            f"Tournament {tournament.id} holds {len(teams)} teams "
            f"but max_teams is {tournament.max_teams}"
        )
    return replace(tournament, title=tournament.title.strip(), teams=teams)


def cleanse_match(
    match: Match,
    placeholder: str = TEAM_PLACEHOLDER,
    missing: str = MISSING_TEAM_PLACEHOLDER,
) -> Match:
    """Sanitize populated opponents and drop a winner that did not play."""
    titles = (placeholder, missing)
    winner = _cleanse_team_ref(match.winner, *titles)
    if winner is not None and winner.id not in match.team_ids:
        logger.warning(
            f"Match {match.id} names winner {winner.id} who is not an opponent, ignoring it"
        )
        winner = None
    return replace(
        match,
        opponent_x=_cleanse_team_ref(match.opponent_x, *titles),
        opponent_y=_cleanse_team_ref(match.opponent_y, *titles),
        winner=winner,
    )


def opponent_name(ref: Optional[Ref[Team]], lookup=None) -> str:
    """Display name of an opponent reference, ``TBD`` when unknown."""
    if ref is None:
        return sanitize_title(None)
    team = ref.resolve(lookup)
    return sanitize_title(team.title if team is not None else None)
