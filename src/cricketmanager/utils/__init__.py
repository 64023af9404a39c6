"""Shared helpers for Cricket Manager."""

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

import logging
import os
from typing import Optional, Union

from cricketmanager.constants import LOG_LEVEL_ENV

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_ROOT_LOGGER_NAME = "cricketmanager"
DEFAULT_LOG_LEVEL = "WARNING"


def log_level_name(level: Union[str, int, None]) -> Optional[str]:
    """Canonical name of a logging level, or None if it is not one."""
    if isinstance(level, int) and not isinstance(level, bool):
        name = logging.getLevelName(level)
        return name if isinstance(name, str) and not name.startswith("Level ") else None
    if isinstance(level, str):
        name = level.strip().upper()
        return name if name in logging.getLevelNamesMapping() else None
    return None


def setup_logger(name: str) -> logging.Logger:
    """Return a module logger under the ``cricketmanager`` hierarchy.

    The package root logger gets a single stream handler the first time
    any module asks for a logger; its level comes from the
    ``CRICKETMANAGER_LOG_LEVEL`` environment variable (default WARNING).
    An unknown level in the variable is reported and ignored.
    """
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        root.addHandler(handler)
        requested = os.environ.get(LOG_LEVEL_ENV)
        level = log_level_name(requested) if requested else DEFAULT_LOG_LEVEL
        root.setLevel(level or DEFAULT_LOG_LEVEL)
        if level is None:
            root.warning(f"Unknown log level {requested!r} in {LOG_LEVEL_ENV}")
    return logging.getLogger(name)


def set_log_level(level: Optional[Union[str, int]]) -> None:
    """Change the package log level, e.g. from configuration.

    Unknown levels are reported and leave the current level in place.
    """
    if level is None:
        return
    name = log_level_name(level)
    root = logging.getLogger(_ROOT_LOGGER_NAME)
    if name is None:
        root.warning(f"Ignoring unknown log level {level!r}")
        return
    root.setLevel(name)
