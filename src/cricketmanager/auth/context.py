"""Session state for the acting principal.

One :class:`AuthContext` is created per client session and handed to every
component that needs the token or the signed-in account. Only the session
owner (the sync client's login/logout) writes to it; everyone else reads
or subscribes.
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

from typing import Callable, List, Optional

from cricketmanager.models import Account
from cricketmanager.utils import setup_logger

logger = setup_logger(__name__)

Listener = Callable[["AuthContext"], None]


class AuthContext:
    """Token and principal of the current session.

    Example:
        >>> auth = AuthContext()
        >>> unsubscribe = auth.subscribe(lambda ctx: print(ctx.is_authenticated))
        >>> auth.set_session("token", Account("a1", "Asha", "asha@example.com"))
        True
        >>> unsubscribe()
    """

    def __init__(self, token: Optional[str] = None, principal: Optional[Account] = None):
        self._token = token
        self._principal = principal
        self._listeners: List[Listener] = []

    @property
    def token(self) -> Optional[str]:
        return self._token

    @property
    def principal(self) -> Optional[Account]:
        return self._principal

    @property
    def is_authenticated(self) -> bool:
        return self._token is not None and self._principal is not None

    @property
    def is_admin(self) -> bool:
        return self._principal is not None and self._principal.is_admin

    def set_session(self, token: str, principal: Optional[Account] = None) -> None:
        """Store a session and notify subscribers.

        ``principal`` may be unknown when the authority issued a token
        without returning the user; such a session is not authenticated.
        """
        self._token = token
        self._principal = principal
        if principal is not None:
            logger.info(f"Signed in as {principal.email} ({principal.role.value})")
        self._notify()

    def update_principal(self, principal: Account) -> None:
        """Replace the stored account with a fresher copy of the same user."""
        if self._principal is None or self._principal.id != principal.id:
            return
        self._principal = principal
        self._notify()

    def clear(self) -> None:
        """Forget the session. Subscribers are notified only on change."""
        if self._token is None and self._principal is None:
            return
        self._token = None
        self._principal = None
        logger.info("Signed out")
        self._notify()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener. Returns a function that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    def __repr__(self) -> str:
        who = self._principal.email if self._principal else None
        return f"AuthContext(principal={who!r})"
