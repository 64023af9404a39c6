"""Validation and invariant engine.

Pure functions that decide whether a proposed mutation is legal given the
best-known state, and that cleanse data received from the authority.
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

from cricketmanager.utils.titles import sanitize_title
from cricketmanager.validation.invariants import (
    check_admin,
    check_capacity,
    check_organizer_payload,
    check_ownership,
    check_signed_in,
    check_squad,
    check_status_change,
    check_team_in_tournament,
    check_team_payload,
    check_tournament_payload,
    check_tournament_update,
)
from cricketmanager.validation.results import CoreError, Outcome
from cricketmanager.validation.sanitize import (
    clean_squad,
    cleanse_match,
    cleanse_team,
    cleanse_tournament,
    opponent_name,
    squad_slots,
)

__all__ = [
    "CoreError",
    "Outcome",
    "check_admin",
    "check_capacity",
    "check_organizer_payload",
    "check_ownership",
    "check_signed_in",
    "check_squad",
    "check_status_change",
    "check_team_in_tournament",
    "check_team_payload",
    "check_tournament_payload",
    "check_tournament_update",
    "clean_squad",
    "cleanse_match",
    "cleanse_team",
    "cleanse_tournament",
    "opponent_name",
    "sanitize_title",
    "squad_slots",
]
