"""Testing support for Cricket Manager.

This module provides:
- An in-memory authority that implements the remote contract
- Random Tournament Generator (RTG)

Use the sandbox CLI: cricket-sandbox
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

from cricketmanager.testing.authority import InMemoryAuthority
from cricketmanager.testing.rtg import RandomTournamentGenerator, RTGConfig, RTGResult

__all__ = [
    "InMemoryAuthority",
    "RandomTournamentGenerator",
    "RTGConfig",
    "RTGResult",
]
