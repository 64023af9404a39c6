"""Match-scheduling orchestrator.

Validates fixtures against a tournament's roster and its scheduled matches,
proposes pairings and checks reported results.
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

from cricketmanager.controllers.scheduling.match_scheduler import (
    FixtureRequest,
    MatchScheduler,
)
from cricketmanager.controllers.scheduling.pairing_history import PairingHistory
from cricketmanager.controllers.scheduling.result_recorder import (
    MatchResult,
    ResultRecorder,
)

__all__ = [
    "FixtureRequest",
    "MatchResult",
    "MatchScheduler",
    "PairingHistory",
    "ResultRecorder",
]
