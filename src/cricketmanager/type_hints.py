"""Type hints used in Cricket Manager."""

from typing import Any, Dict, List, Literal, Optional, Tuple, Union

TournamentStatusName = Literal["upcoming", "open", "ongoing", "completed"]
MatchStatusName = Literal["scheduled", "live", "completed", "abandoned"]
PlayerRoleName = Literal["batsman", "baller", "keeper", "all_rounder", "captain"]
AccountRoleName = Literal["organizer", "admin"]

# Listing scope for tournaments and teams
Scope = Literal["all", "mine"]

# Match list ordering contexts
SortContext = Literal["upcoming", "completed"]

# A raw document as the authority returns it (camelCase keys, ``_id``)
Payload = Dict[str, Any]
Payloads = List[Payload]

# A foreign key on the wire: a bare id or a populated document
RawRef = Union[str, Payload, None]

# A proposed fixture, (opponent_x_id, opponent_y_id)
Fixture = Tuple[str, str]
MaybeId = Optional[str]
