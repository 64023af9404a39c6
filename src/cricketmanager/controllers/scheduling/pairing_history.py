"""Fixture history for a tournament."""

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
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, Iterable, Set

from cricketmanager.models import Match, MatchStatus
from cricketmanager.utils.dates import as_utc


@dataclass
class PairingHistory:
    """
    Tracks which teams have met and which slots they occupy.

    Attributes
    ----------
    meetings : Counter of frozenset of str
        Number of non-abandoned matches per pair of team ids.
    open_pairs : set of frozenset of str
        Pairs with a scheduled or live match.
    matches_played : Counter of str
        Non-abandoned matches per team id.
    occupied_slots : dict of str to set of datetime
        Date/time slots (in UTC) held by each team's scheduled or live
        matches.
    """

    meetings: Counter = field(default_factory=Counter)
    open_pairs: Set[frozenset] = field(default_factory=set)
    matches_played: Counter = field(default_factory=Counter)
    occupied_slots: Dict[str, Set[datetime]] = field(default_factory=dict)

    def add_match(self, match: Match) -> None:
        """Record a match."""
        if match.status == MatchStatus.ABANDONED:
            return
        x_id, y_id = match.team_ids
        pair = frozenset({x_id, y_id})
        self.meetings[pair] += 1
        self.matches_played[x_id] += 1
        self.matches_played[y_id] += 1
        if match.is_open:
            self.open_pairs.add(pair)
            if match.match_date is not None:
                slot = as_utc(match.match_date)
                for team_id in (x_id, y_id):
                    self.occupied_slots.setdefault(team_id, set()).add(slot)

    def have_played(self, team1_id: str, team2_id: str) -> bool:
        """Check if two teams have a match, played or pending."""
        return self.meetings[frozenset({team1_id, team2_id})] > 0

    def meeting_count(self, team1_id: str, team2_id: str) -> int:
        return self.meetings[frozenset({team1_id, team2_id})]

    def has_open_fixture(self, team1_id: str, team2_id: str) -> bool:
        return frozenset({team1_id, team2_id}) in self.open_pairs

    def slot_taken(self, team_id: str, slot: datetime) -> bool:
        """Whether the team already has an open match at ``slot``."""
        return as_utc(slot) in self.occupied_slots.get(team_id, set())

    @classmethod
    def from_matches(cls, matches: Iterable[Match]) -> "PairingHistory":
        history = cls()
        for match in matches:
            history.add_match(match)
        return history
