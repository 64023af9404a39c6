"""Browsing helpers for public listings and dashboards.

Filtering, ordering and labelling of tournaments, teams, matches and
organizers. Every function works on already-fetched entities and leaves
the input order alone unless it is documented to sort.
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

from collections import Counter
from datetime import date
from typing import Any, Callable, Dict, Iterable, List, Optional

from cricketmanager.constants import (
    DISPLAY_COMPLETED,
    DISPLAY_LIVE,
    DISPLAY_UPCOMING,
    STAGE_FINAL,
    STAGE_LEAGUE,
    STAGE_SEMIFINAL,
    TAB_ALL,
    TAB_UPCOMING,
)
from cricketmanager.models import (
    Account,
    Match,
    MatchStatus,
    Team,
    Tournament,
    TournamentStatus,
)
from cricketmanager.type_hints import SortContext
from cricketmanager.utils.dates import sort_key
from cricketmanager.validation.sanitize import opponent_name

TeamLookup = Optional[Callable[[str], Optional[Team]]]

UPCOMING_TAB_STATUSES = (TournamentStatus.UPCOMING.value, TournamentStatus.OPEN.value)
VISIBLE_STATUSES = (
    TournamentStatus.UPCOMING.value,
    TournamentStatus.OPEN.value,
    TournamentStatus.ONGOING.value,
)


def _by_start(
    tournaments: Iterable[Tournament], latest_first: bool = False
) -> List[Tournament]:
    """Sort by start date; tournaments without one always come last."""
    tournaments = list(tournaments)
    dated = [t for t in tournaments if t.start_date is not None]
    undated = [t for t in tournaments if t.start_date is None]
    dated.sort(key=lambda t: t.start_date, reverse=latest_first)
    return dated + undated


# ========== Tournaments ==========


def filter_tournaments(
    tournaments: Iterable[Tournament], tab: str = TAB_ALL, query: str = ""
) -> List[Tournament]:
    """Tournaments for a browsing tab and search query.

    Args:
        tournaments: Tournaments to filter
        tab: ``all``, ``upcoming`` (upcoming or open) or a status name
        query: Case-insensitive match against title or city

    Returns:
        Matching tournaments, nearest start first, or latest start first
        for the ``completed`` tab
    """
    filtered = list(tournaments)

    if tab == TAB_UPCOMING:
        filtered = [t for t in filtered if t.status_name in UPCOMING_TAB_STATUSES]
    elif tab != TAB_ALL:
        filtered = [t for t in filtered if t.status_name == tab]

    needle = query.strip().casefold()
    if needle:
        filtered = [
            t
            for t in filtered
            if needle in t.title.casefold() or needle in t.location.city.casefold()
        ]

    return _by_start(filtered, latest_first=tab == TournamentStatus.COMPLETED.value)


def upcoming_tournaments(tournaments: Iterable[Tournament]) -> List[Tournament]:
    """Upcoming, open and ongoing tournaments, nearest start first."""
    return _by_start(t for t in tournaments if t.status_name in VISIBLE_STATUSES)


def is_active_tournament(tournament: Tournament, today: Optional[date] = None) -> bool:
    """Ongoing, or not yet past its end date."""
    today = today or date.today()
    if tournament.status_name == TournamentStatus.ONGOING.value:
        return True
    return tournament.end_date is not None and tournament.end_date >= today


# ========== Matches ==========


def display_status(match: Match) -> str:
    """Public label: scheduled shows as upcoming, finished states as completed."""
    if match.status == MatchStatus.SCHEDULED:
        return DISPLAY_UPCOMING
    if match.status == MatchStatus.LIVE:
        return DISPLAY_LIVE
    return DISPLAY_COMPLETED


def match_stage(match: Match) -> str:
    if match.final:
        return STAGE_FINAL
    if match.semifinal:
        return STAGE_SEMIFINAL
    return STAGE_LEAGUE


def match_title(match: Match, lookup: TeamLookup = None) -> str:
    """``"X vs Y"`` with sanitized names."""
    return f"{opponent_name(match.opponent_x, lookup)} vs {opponent_name(match.opponent_y, lookup)}"


def result_summary(match: Match, lookup: TeamLookup = None) -> Optional[str]:
    """``"X won by 23 runs"`` for completed matches, None otherwise."""
    if match.status == MatchStatus.ABANDONED:
        return "Match abandoned"
    if match.status != MatchStatus.COMPLETED or match.winner is None:
        return None

    name = opponent_name(match.winner, lookup)
    if match.won_by_run is not None:
        unit = "run" if match.won_by_run == 1 else "runs"
        return f"{name} won by {match.won_by_run} {unit}"
    if match.won_by_wicket is not None:
        unit = "wicket" if match.won_by_wicket == 1 else "wickets"
        return f"{name} won by {match.won_by_wicket} {unit}"
    return f"{name} won"


def matches_for_tournament(matches: Iterable[Match], tournament_id: str) -> List[Match]:
    """Matches of one tournament, whether their reference is populated or not."""
    return [m for m in matches if m.tournament_id == tournament_id]


def sort_matches(matches: Iterable[Match], context: SortContext = "upcoming") -> List[Match]:
    """Order matches for a view.

    ``upcoming`` lists the earliest match date first, ``completed`` the
    latest. Creation time breaks ties.
    """

    def key(match: Match):
        return (sort_key(match.match_date), sort_key(match.created_at))

    return sorted(matches, key=key, reverse=context == "completed")


# ========== Search ==========


def search_teams(teams: Iterable[Team], query: str = "") -> List[Team]:
    needle = query.strip().casefold()
    if not needle:
        return list(teams)
    return [t for t in teams if needle in t.display_name.casefold()]


def search_organizers(accounts: Iterable[Account], query: str = "") -> List[Account]:
    """Organizers whose name, email or city contains ``query``."""
    needle = query.strip().casefold()
    if not needle:
        return list(accounts)
    return [
        a
        for a in accounts
        if needle in a.name.casefold()
        or needle in a.email.casefold()
        or needle in (a.city or "").casefold()
    ]


# ========== Dashboards ==========


def dashboard_stats(
    tournaments: Iterable[Tournament],
    teams: Iterable[Team] = (),
    matches: Iterable[Match] = (),
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """Counts shown on the organizer and administrator dashboards."""
    tournaments = list(tournaments)
    match_status = Counter(m.status.value for m in matches)
    return {
        "tournaments": len(tournaments),
        "active_tournaments": sum(1 for t in tournaments if is_active_tournament(t, today)),
        "teams": len(list(teams)),
        "registered_teams": sum(len(t.teams) for t in tournaments),
        "matches": sum(match_status.values()),
        "matches_by_status": {status.value: match_status[status.value] for status in MatchStatus},
    }
