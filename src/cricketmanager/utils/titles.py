"""Display-name sanitation for team and opponent titles.

Some records held by the authority carry a corrupted title where a
serialized object was prepended to the real name, e.g.
``"{foo:1}Mumbai Indians"``. Every place that shows or compares a team name
goes through :func:`sanitize_title`.
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

from typing import Optional

from cricketmanager.constants import MISSING_TEAM_PLACEHOLDER, TEAM_PLACEHOLDER


def sanitize_title(
    title: Optional[str],
    placeholder: str = TEAM_PLACEHOLDER,
    missing: str = MISSING_TEAM_PLACEHOLDER,
) -> str:
    """Return the clean display name for a possibly corrupted title.

    Args:
        title: Title as received, may be None
        placeholder: Returned when nothing follows the last ``}``
        missing: Returned when there is no title at all

    Returns:
        Text after the last ``}``, trimmed, or the matching fallback

    Example:
        >>> sanitize_title("{foo:1}Mumbai Indians")
        'Mumbai Indians'
        >>> sanitize_title("{x}")
        'Team'
    """
    if title is None or not str(title).strip():
        return missing

    title = str(title)
    if "}" in title:
        return title.rsplit("}", 1)[1].strip() or placeholder
    return title.strip()


def titles_match(left: Optional[str], right: Optional[str]) -> bool:
    """Compare two titles by their sanitized, case-folded form."""
    return sanitize_title(left).casefold() == sanitize_title(right).casefold()
