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

# --- Constants ---
CONFIG_FILE_NAME = "cricketmanager.toml"
CONFIG_SECTION = "cricketmanager"
LOG_LEVEL_ENV = "CRICKETMANAGER_LOG_LEVEL"

# Tournament status values
TOURNAMENT_UPCOMING = "upcoming"
TOURNAMENT_OPEN = "open"
TOURNAMENT_ONGOING = "ongoing"
TOURNAMENT_COMPLETED = "completed"

# Rank used only when strict status transitions are enabled.
# open and ongoing share the middle of the series.
TOURNAMENT_STATUS_RANK = {
    TOURNAMENT_UPCOMING: 0,
    TOURNAMENT_OPEN: 1,
    TOURNAMENT_ONGOING: 2,
    TOURNAMENT_COMPLETED: 3,
}

# Match status values
MATCH_SCHEDULED = "scheduled"
MATCH_LIVE = "live"
MATCH_COMPLETED = "completed"
MATCH_ABANDONED = "abandoned"

# Allowed match status transitions. completed and abandoned are terminal.
MATCH_TRANSITIONS = {
    MATCH_SCHEDULED: {MATCH_LIVE, MATCH_COMPLETED, MATCH_ABANDONED},
    MATCH_LIVE: {MATCH_COMPLETED, MATCH_ABANDONED},
    MATCH_COMPLETED: set(),
    MATCH_ABANDONED: set(),
}

# Matches in these states occupy their date/time slot
OPEN_MATCH_STATUSES = (MATCH_SCHEDULED, MATCH_LIVE)

# Player roles
ROLE_BATSMAN = "batsman"
ROLE_BALLER = "baller"
ROLE_KEEPER = "keeper"
ROLE_ALL_ROUNDER = "all_rounder"
ROLE_CAPTAIN = "captain"

PLAYER_ROLE_ALIASES = {
    "bowler": ROLE_BALLER,
    "wicket_keeper": ROLE_KEEPER,
    "wicketkeeper": ROLE_KEEPER,
    "allrounder": ROLE_ALL_ROUNDER,
    "all-rounder": ROLE_ALL_ROUNDER,
}

# Account roles
ACCOUNT_ORGANIZER = "organizer"
ACCOUNT_ADMIN = "admin"

# Listing scopes
SCOPE_ALL = "all"
SCOPE_MINE = "mine"

# Squad editing
DEFAULT_SQUAD_SLOTS = 11
DEFAULT_PLAYER_ROLE = ROLE_BATSMAN

# Display fallbacks for sanitized titles
TEAM_PLACEHOLDER = "Team"
MISSING_TEAM_PLACEHOLDER = "TBD"

# Match stage labels
STAGE_FINAL = "Final"
STAGE_SEMIFINAL = "Semi-Final"
STAGE_LEAGUE = "League"

# Display status used by public listings
DISPLAY_UPCOMING = "upcoming"
DISPLAY_LIVE = "live"
DISPLAY_COMPLETED = "completed"

# Browsing tabs
TAB_ALL = "all"
TAB_UPCOMING = "upcoming"

# Result margins
MAX_WICKET_MARGIN = 10

PINCODE_LENGTH = 6
MIN_PASSWORD_LENGTH = 6
