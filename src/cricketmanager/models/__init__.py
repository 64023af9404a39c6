"""Domain model for Cricket Manager.

Pure data: tournaments, teams, players, matches and accounts, plus the
reference-or-value type used for every foreign key.
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

from cricketmanager.models.account import Account, Administrator, Organizer
from cricketmanager.models.enums import (
    AccountRole,
    ErrorKind,
    MatchStatus,
    PlayerRole,
    TournamentStatus,
)
from cricketmanager.models.match import Match
from cricketmanager.models.player import Player
from cricketmanager.models.refs import Ref, raw_id
from cricketmanager.models.team import Team
from cricketmanager.models.tournament import Location, Prize, Tournament

__all__ = [
    "Account",
    "AccountRole",
    "Administrator",
    "ErrorKind",
    "Location",
    "Match",
    "MatchStatus",
    "Organizer",
    "Player",
    "PlayerRole",
    "Prize",
    "Ref",
    "Team",
    "Tournament",
    "TournamentStatus",
    "raw_id",
]
