"""Client-side synchronization with the remote authority.

:class:`CricketSync` is the public boundary of the core. Each mutation runs
the local invariant checks, issues the remote call, and merges the
authority's returned entity into the cache, overwriting anything known
locally. Every operation returns an :class:`Outcome`; no exception other
than cancellation crosses this boundary.
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

import asyncio
from dataclasses import replace
from typing import (
    Any,
    Awaitable,
    Callable,
    Dict,
    Iterable,
    List,
    Mapping,
    Optional,
    Tuple,
    TypeVar,
)

from cricketmanager.auth import AuthContext
from cricketmanager.config import CricketConfig
from cricketmanager.controllers.scheduling import MatchScheduler, ResultRecorder
from cricketmanager.exceptions import CricketManagerException
from cricketmanager.models import (
    Account,
    ErrorKind,
    Match,
    MatchStatus,
    Player,
    Team,
    Tournament,
    raw_id,
)
from cricketmanager.sync.authority import Authority
from cricketmanager.sync.cache import (
    ALL,
    MATCHES,
    ORGANIZERS,
    TEAMS,
    TOURNAMENTS,
    EntityCache,
)
from cricketmanager.type_hints import Fixture, Payload, Scope
from cricketmanager.utils import set_log_level, setup_logger
from cricketmanager.validation import (
    Outcome,
    check_admin,
    check_capacity,
    check_organizer_payload,
    check_ownership,
    check_signed_in,
    check_squad,
    check_team_payload,
    check_tournament_payload,
    check_tournament_update,
    cleanse_match,
    cleanse_team,
    cleanse_tournament,
    squad_slots,
)
from cricketmanager.validation.sanitize import PlayerLike

logger = setup_logger(__name__)

T = TypeVar("T")

# Failures after which the cached copy of the target is no longer trusted
_STALE_KINDS = (ErrorKind.CONFLICT_DETECTED, ErrorKind.INVALID_REFERENCE)
MALFORMED_DOCUMENT_ERRORS = (ValueError, TypeError, AttributeError, KeyError)


def parse_documents(label: str, documents: Any, parse: Callable[[Any], T]) -> List[T]:
    """Parse a listing, skipping records that cannot be read."""
    parsed = []
    for document in documents or []:
        try:
            parsed.append(parse(document))
        except MALFORMED_DOCUMENT_ERRORS as e:
            logger.warning(f"Skipping malformed {label} {raw_id(document)!r}: {e!r}")
    return parsed


class CricketSync:
    """Tournament, team, match and account operations against an authority.

    The sync client is the only writer of its :class:`EntityCache`. Writes
    to the same entity are serialized in submission order by a per-entity
    lock; unrelated operations proceed concurrently. A call abandoned by
    its caller (task cancellation) leaves the cache as it was before the
    call.

    Usage::

        sync = CricketSync(authority)
        await sync.login("admin@example.com", "secret")
        await sync.verify_otp("admin@example.com", code)
        created = await sync.create_tournament(form)
        if not created:
            show(created.error.kind, created.error.detail)
    """

    def __init__(
        self,
        authority: Authority,
        auth: Optional[AuthContext] = None,
        config: Optional[CricketConfig] = None,
        cache: Optional[EntityCache] = None,
    ):
        self.authority = authority
        self.auth = auth or AuthContext()
        self.config = config or CricketConfig()
        self.cache = cache or EntityCache()
        self.scheduler = MatchScheduler(
            enforce_slot_conflicts=self.config.enforce_slot_conflicts
        )
        self.recorder = ResultRecorder()
        self._locks: Dict[Tuple[str, str], asyncio.Lock] = {}
        if config is not None:
            set_log_level(config.log_level)

    @property
    def principal(self) -> Optional[Account]:
        return self.auth.principal

    # ========== Plumbing ==========

    def _lock(self, collection: str, entity_id: str) -> asyncio.Lock:
        key = (collection, entity_id)
        if key not in self._locks:
            self._locks[key] = asyncio.Lock()
        return self._locks[key]

    async def _call(
        self,
        action: str,
        operation: Awaitable[Any],
        parse: Optional[Callable[[Any], Any]] = None,
    ) -> Outcome[Any]:
        """Await an authority call and convert its failure to an Outcome.

        ``parse`` turns the answer into entities; an answer it cannot read
        is a ``ValidationFailed`` outcome.
        """
        try:
            answer = await operation
        except CricketManagerException as e:
            outcome: Outcome[Any] = Outcome.from_exception(e)
        except (ConnectionError, TimeoutError, OSError) as e:
            outcome = Outcome.failure(
                ErrorKind.TRANSPORT_FAILURE, f"{action} failed: authority unreachable ({e})"
            )
        else:
            if parse is None:
                return Outcome.success(answer)
            try:
                return Outcome.success(parse(answer))
            except MALFORMED_DOCUMENT_ERRORS as e:
                outcome = Outcome.failure(
                    ErrorKind.VALIDATION_FAILED,
                    f"{action} failed: malformed answer from authority ({e!r})",
                )

        if outcome.kind == ErrorKind.TRANSPORT_FAILURE:
            logger.error(f"{action} failed: {outcome.error}")
        else:
            logger.warning(f"{action} rejected by authority: {outcome.error}")
        return outcome

    def _denied(self, action: str, outcome: Outcome) -> Outcome:
        logger.warning(f"{action} denied: {outcome.error}")
        return outcome

    def _forget(self, collection: str, entity_id: str, outcome: Outcome) -> None:
        """Drop a cached entity the authority has shown to be stale."""
        if outcome.kind in _STALE_KINDS:
            self.cache.remove(collection, entity_id)
            self.cache.invalidate(collection)

    def _titles(self) -> Tuple[str, str]:
        return (self.config.team_placeholder, self.config.missing_team_placeholder)

    # ========== Merging authoritative data ==========

    def _read_tournament(self, data: Payload) -> Tournament:
        return cleanse_tournament(Tournament.from_dict(data), *self._titles())

    def _read_team(self, data: Payload) -> Team:
        return cleanse_team(Team.from_dict(data), *self._titles())

    def _read_match(self, data: Payload) -> Match:
        return cleanse_match(Match.from_dict(data), *self._titles())

    def _merge_tournament(self, data: Payload) -> Tournament:
        tournament = self._read_tournament(data)
        for ref in tournament.teams:
            if ref.value is not None:
                self.cache.put(TEAMS, ref.value)
        if tournament.organizer is not None and tournament.organizer.value is not None:
            self.cache.put(ORGANIZERS, tournament.organizer.value)
        return self.cache.put(TOURNAMENTS, tournament)

    def _merge_team(self, data: Payload) -> Team:
        return self.cache.put(TEAMS, self._read_team(data))

    def _merge_match(self, data: Payload) -> Match:
        return self.cache.put(MATCHES, self._read_match(data))

    def _merge_account(self, data: Payload) -> Account:
        return self.cache.put(ORGANIZERS, Account.from_dict(data))

    async def _known_tournament(self, tournament_id: str) -> Outcome[Tournament]:
        """Best-known tournament: the cached copy, or a fresh fetch."""
        cached = self.cache.get(TOURNAMENTS, tournament_id)
        if cached is not None:
            return Outcome.success(cached)
        return await self.get_tournament(tournament_id)

    async def _known_team(self, team_id: str) -> Outcome[Team]:
        cached = self.cache.get(TEAMS, team_id)
        if cached is not None:
            return Outcome.success(cached)
        return await self.get_team(team_id)

    async def _known_match(self, match_id: str) -> Outcome[Match]:
        cached = self.cache.get(MATCHES, match_id)
        if cached is not None:
            return Outcome.success(cached)
        listed = await self.list_matches(refresh=True)
        if not listed:
            return listed
        match = self.cache.get(MATCHES, match_id)
        if match is None:
            return Outcome.failure(ErrorKind.INVALID_REFERENCE, f"Unknown match {match_id}")
        return Outcome.success(match)

    async def _known_matches(self, tournament_id: str) -> Outcome[List[Match]]:
        cached = self.cache.snapshot(MATCHES, tournament_id)
        if cached is not None:
            return Outcome.success(cached)
        return await self.list_matches(tournament_id)

    # ========== Tournaments ==========

    async def list_tournaments(
        self, scope: Scope = "all", refresh: bool = False
    ) -> Outcome[List[Tournament]]:
        """Tournaments visible in ``scope``, from cache unless ``refresh``."""
        if scope == "mine":
            access = check_signed_in(self.principal)
            if not access:
                return self._denied("List own tournaments", access)

        if not refresh:
            cached = self.cache.snapshot(TOURNAMENTS, scope)
            if cached is not None:
                return Outcome.success(cached)

        epoch = self.cache.epoch(TOURNAMENTS, scope)
        outcome = await self._call(
            "List tournaments",
            self.authority.list_tournaments(self.auth.token, scope),
            parse=lambda docs: parse_documents("tournament", docs, self._read_tournament),
        )
        if not outcome:
            return outcome

        tournaments = outcome.value
        self.cache.store_snapshot(TOURNAMENTS, scope, tournaments, epoch)
        return Outcome.success(tournaments)

    async def get_tournament(self, tournament_id: str) -> Outcome[Tournament]:
        """Fetch a tournament with its roster populated."""
        outcome = await self._call(
            f"Get tournament {tournament_id}",
            self.authority.get_tournament(self.auth.token, tournament_id),
            parse=self._merge_tournament,
        )
        if not outcome:
            self._forget(TOURNAMENTS, tournament_id, outcome)
        return outcome

    async def create_tournament(self, data: Mapping[str, Any]) -> Outcome[Tournament]:
        """Create a tournament owned by the signed-in organizer."""
        access = check_signed_in(self.principal)
        if not access:
            return self._denied("Create tournament", access)

        checked = check_tournament_payload(data)
        if not checked:
            return self._denied("Create tournament", checked)

        outcome = await self._call(
            "Create tournament",
            self.authority.create_tournament(self.auth.token, checked.value),
            parse=self._merge_tournament,
        )
        if not outcome:
            return outcome

        tournament = outcome.value
        self.cache.invalidate(TOURNAMENTS)
        logger.info(f"Created tournament {tournament.id} '{tournament.title}'")
        return Outcome.success(tournament)

    async def update_tournament(
        self, tournament_id: str, changes: Mapping[str, Any]
    ) -> Outcome[Tournament]:
        """Apply a field-level edit by the owning organizer or an administrator.

        The edit is sent with the version of the cached copy; when another
        client changed the tournament meanwhile the authority reports a
        conflict, the cached copy is dropped, and the caller may retry
        against fresh data.
        """
        return await self._update_tournament(tournament_id, changes, admin_only=False)

    async def set_tournament_status(
        self, tournament_id: str, status: str
    ) -> Outcome[Tournament]:
        """Administrator status toggle."""
        return await self._update_tournament(
            tournament_id, {"status": status}, admin_only=True
        )

    async def _update_tournament(
        self, tournament_id: str, changes: Mapping[str, Any], admin_only: bool
    ) -> Outcome[Tournament]:
        action = f"Update tournament {tournament_id}"
        async with self._lock(TOURNAMENTS, tournament_id):
            known = await self._known_tournament(tournament_id)
            if not known:
                return known
            current = known.value

            access = (
                check_admin(self.principal, "Changing tournament status")
                if admin_only
                else check_ownership(self.principal, current)
            )
            if not access:
                return self._denied(action, access)

            checked = check_tournament_update(
                current, changes, strict_status=self.config.strict_status_transitions
            )
            if not checked:
                return self._denied(action, checked)

            partial = dict(checked.value)
            partial["expectedVersion"] = current.version
            outcome = await self._call(
                action,
                self.authority.update_tournament(self.auth.token, tournament_id, partial),
                parse=self._merge_tournament,
            )
            if not outcome:
                self._forget(TOURNAMENTS, tournament_id, outcome)
                return outcome

            tournament = outcome.value
            self.cache.invalidate(TOURNAMENTS)
            logger.info(f"Updated tournament {tournament_id}: {', '.join(sorted(changes))}")
            return Outcome.success(tournament)

    # ========== Teams ==========

    async def list_teams(self, scope: Scope = "all", refresh: bool = False) -> Outcome[List[Team]]:
        if scope == "mine":
            access = check_signed_in(self.principal)
            if not access:
                return self._denied("List own teams", access)

        if not refresh:
            cached = self.cache.snapshot(TEAMS, scope)
            if cached is not None:
                return Outcome.success(cached)

        epoch = self.cache.epoch(TEAMS, scope)
        outcome = await self._call(
            "List teams",
            self.authority.list_teams(self.auth.token, scope),
            parse=lambda docs: parse_documents("team", docs, self._read_team),
        )
        if not outcome:
            return outcome

        teams = outcome.value
        self.cache.store_snapshot(TEAMS, scope, teams, epoch)
        return Outcome.success(teams)

    async def get_team(self, team_id: str) -> Outcome[Team]:
        outcome = await self._call(
            f"Get team {team_id}",
            self.authority.get_team(self.auth.token, team_id),
            parse=self._merge_team,
        )
        if not outcome:
            self._forget(TEAMS, team_id, outcome)
        return outcome

    async def create_team(self, data: Mapping[str, Any]) -> Outcome[Team]:
        """Register a team in a tournament.

        Fails with ``CapacityExceeded`` when the best-known roster is
        already full. On success the tournament is refetched so its roster
        is the authority's.
        """
        access = check_signed_in(self.principal)
        if not access:
            return self._denied("Create team", access)

        checked = check_team_payload(data)
        if not checked:
            return self._denied("Create team", checked)
        payload = checked.value
        tournament_id = payload["tournamentId"]

        async with self._lock(TOURNAMENTS, tournament_id):
            known = await self._known_tournament(tournament_id)
            if not known:
                return known
            tournament = known.value

            for check in (check_ownership(self.principal, tournament), check_capacity(tournament)):
                if not check:
                    return self._denied(f"Add team to {tournament_id}", check)

            outcome = await self._call(
                f"Add team to {tournament_id}",
                self.authority.create_team(self.auth.token, payload),
                parse=self._merge_team,
            )
            if not outcome:
                self._forget(TOURNAMENTS, tournament_id, outcome)
                return outcome

            team = outcome.value
            self.cache.invalidate(TEAMS)
            self.cache.invalidate(TOURNAMENTS)
            # The roster changed; never keep the pre-write copy
            self.cache.remove(TOURNAMENTS, tournament_id)
            await self.get_tournament(tournament_id)

        logger.info(f"Registered team {team.id} '{team.display_name}' in {tournament_id}")
        return Outcome.success(team)

    async def add_players(self, team_id: str, players: Iterable[PlayerLike]) -> Outcome[Team]:
        """Append named players to a squad. At least one name is required."""
        return await self._write_squad(team_id, players, append=True)

    async def replace_squad(self, team_id: str, players: Iterable[PlayerLike]) -> Outcome[Team]:
        """Replace a squad with the named entries of ``players``.

        Blank rows are dropped and an empty squad is allowed. Sending the
        same list twice yields the same squad.
        """
        return await self._write_squad(team_id, players, append=False)

    async def _write_squad(
        self, team_id: str, players: Iterable[PlayerLike], append: bool
    ) -> Outcome[Team]:
        action = f"{'Add players to' if append else 'Replace squad of'} team {team_id}"
        async with self._lock(TEAMS, team_id):
            access = check_signed_in(self.principal)
            if not access:
                return self._denied(action, access)

            squad = check_squad(players, require_named=append)
            if not squad:
                return self._denied(action, squad)

            known_team = await self._known_team(team_id)
            if not known_team:
                return known_team
            team = known_team.value

            if team.tournament_id is None:
                return Outcome.failure(
                    ErrorKind.INVALID_REFERENCE, f"Team {team_id} has no tournament"
                )
            known = await self._known_tournament(team.tournament_id)
            if not known:
                return known
            access = check_ownership(self.principal, known.value)
            if not access:
                return self._denied(action, access)

            wire = [p.to_payload() for p in squad.value]
            call = self.authority.add_players if append else self.authority.replace_squad
            outcome = await self._call(
                action, call(self.auth.token, team_id, wire), parse=self._merge_team
            )
            if not outcome:
                self._forget(TEAMS, team_id, outcome)
                return outcome

            team = outcome.value
            self.cache.invalidate(TEAMS)
            logger.info(f"{action}: {len(team.players)} players")
            return Outcome.success(team)

    async def delete_team(self, team_id: str) -> Outcome[None]:
        """Delete a team (administrators only).

        The team disappears from its tournament's roster at the authority;
        the cached tournament and every affected listing are dropped.
        """
        action = f"Delete team {team_id}"
        access = check_admin(self.principal, "Deleting a team")
        if not access:
            return self._denied(action, access)

        async with self._lock(TEAMS, team_id):
            cached = self.cache.get(TEAMS, team_id)
            outcome = await self._call(
                action, self.authority.delete_team(self.auth.token, team_id)
            )
            if not outcome:
                self._forget(TEAMS, team_id, outcome)
                return outcome

            self.cache.remove(TEAMS, team_id)
            tournament_id = cached.tournament_id if cached is not None else None
            if tournament_id is not None:
                self.cache.remove(TOURNAMENTS, tournament_id)
                self.cache.invalidate(MATCHES, tournament_id)
            else:
                for tournament in self.cache.values(TOURNAMENTS):
                    if tournament.has_team(team_id):
                        self.cache.remove(TOURNAMENTS, tournament.id)
            self.cache.invalidate(TEAMS)
            self.cache.invalidate(TOURNAMENTS)
            self.cache.invalidate(MATCHES, ALL)

        logger.info(f"Deleted team {team_id}")
        return Outcome.success(None)

    # ========== Matches ==========

    async def list_matches(
        self, tournament_id: Optional[str] = None, refresh: bool = False
    ) -> Outcome[List[Match]]:
        """Matches of one tournament, or all matches, in authority order."""
        key = tournament_id or ALL
        if not refresh:
            cached = self.cache.snapshot(MATCHES, key)
            if cached is not None:
                return Outcome.success(cached)

        epoch = self.cache.epoch(MATCHES, key)
        outcome = await self._call(
            "List matches",
            self.authority.list_matches(self.auth.token, tournament_id),
            parse=lambda docs: parse_documents("match", docs, self._read_match),
        )
        if not outcome:
            return outcome

        matches = outcome.value
        self.cache.store_snapshot(MATCHES, key, matches, epoch)
        return Outcome.success(matches)

    async def create_match(
        self,
        tournament_id: str,
        opponent_x: Any,
        opponent_y: Any,
        match_date: Any,
        semifinal: bool = False,
        final: bool = False,
    ) -> Outcome[Match]:
        """Schedule a fixture between two teams of the tournament.

        The roster is the authority's current one. The new match is
        appended to the tournament's cached match list.
        """
        action = f"Schedule match in {tournament_id}"
        access = check_signed_in(self.principal)
        if not access:
            return self._denied(action, access)

        async with self._lock(MATCHES, tournament_id):
            fetched = await self.get_tournament(tournament_id)
            if not fetched:
                return fetched
            tournament = fetched.value

            access = check_ownership(self.principal, tournament)
            if not access:
                return self._denied(action, access)

            matches = await self._known_matches(tournament_id)
            if not matches:
                return matches

            fixture = self.scheduler.validate_fixture(
                tournament,
                matches.value,
                opponent_x,
                opponent_y,
                match_date,
                semifinal=semifinal,
                final=final,
            )
            if not fixture:
                return self._denied(action, fixture)

            outcome = await self._call(
                action,
                self.authority.create_match(self.auth.token, fixture.value.to_payload()),
                parse=self._read_match,
            )
            if not outcome:
                self._forget(TOURNAMENTS, tournament_id, outcome)
                return outcome

            match = outcome.value
            self.cache.append_to_snapshot(MATCHES, tournament_id, match)
            self.cache.invalidate(MATCHES, ALL)

        logger.info(
            f"Scheduled match {match.id}: {match.opponent_x.id} vs {match.opponent_y.id}"
        )
        return Outcome.success(match)

    async def propose_pairings(
        self, tournament_id: str, limit: Optional[int] = None
    ) -> Outcome[List[Fixture]]:
        """Suggest fixtures between teams of the tournament that have not met."""
        fetched = await self.get_tournament(tournament_id)
        if not fetched:
            return fetched
        matches = await self._known_matches(tournament_id)
        if not matches:
            return matches
        return self.scheduler.propose_pairings(fetched.value, matches.value, limit)

    async def start_match(self, match_id: str) -> Outcome[Match]:
        return await self._change_match_status(match_id, MatchStatus.LIVE)

    async def abandon_match(self, match_id: str) -> Outcome[Match]:
        return await self._change_match_status(match_id, MatchStatus.ABANDONED)

    async def record_result(
        self,
        match_id: str,
        winner: Any,
        won_by_run: Optional[int] = None,
        won_by_wicket: Optional[int] = None,
    ) -> Outcome[Match]:
        """Complete a match. The winner must be one of its two opponents."""

        def check(match: Match) -> Outcome[Payload]:
            result = self.recorder.validate_result(match, winner, won_by_run, won_by_wicket)
            return Outcome.success(result.value.to_payload()) if result else result

        return await self._update_match(match_id, f"Record result of {match_id}", check)

    async def _change_match_status(self, match_id: str, target: MatchStatus) -> Outcome[Match]:
        def check(match: Match) -> Outcome[Payload]:
            transition = self.scheduler.check_transition(match, target)
            return Outcome.success({"status": target.value}) if transition else transition

        return await self._update_match(match_id, f"Mark match {match_id} {target.value}", check)

    async def _update_match(self, match_id: str, action: str, check) -> Outcome[Match]:
        access = check_signed_in(self.principal)
        if not access:
            return self._denied(action, access)

        async with self._lock(MATCHES, match_id):
            known = await self._known_match(match_id)
            if not known:
                return known
            match = known.value

            tournament = await self._known_tournament(match.tournament_id)
            if not tournament:
                return tournament
            access = check_ownership(self.principal, tournament.value)
            if not access:
                return self._denied(action, access)

            partial = check(match)
            if not partial:
                return self._denied(action, partial)

            outcome = await self._call(
                action,
                self.authority.update_match(self.auth.token, match_id, partial.value),
                parse=self._merge_match,
            )
            if not outcome:
                self._forget(MATCHES, match_id, outcome)
                return outcome

            updated = outcome.value
            logger.info(f"{action}: now {updated.status.value}")
            return Outcome.success(updated)

    # ========== Organizers ==========

    async def list_organizers(self, refresh: bool = False) -> Outcome[List[Account]]:
        access = check_admin(self.principal, "Listing organizers")
        if not access:
            return self._denied("List organizers", access)

        if not refresh:
            cached = self.cache.snapshot(ORGANIZERS)
            if cached is not None:
                return Outcome.success(cached)

        epoch = self.cache.epoch(ORGANIZERS)
        outcome = await self._call(
            "List organizers",
            self.authority.list_organizers(self.auth.token),
            parse=lambda docs: parse_documents("account", docs, Account.from_dict),
        )
        if not outcome:
            return outcome

        organizers = outcome.value
        self.cache.store_snapshot(ORGANIZERS, ALL, organizers, epoch)
        return Outcome.success(organizers)

    async def create_organizer(self, data: Mapping[str, Any]) -> Outcome[Account]:
        access = check_admin(self.principal, "Creating an organizer")
        if not access:
            return self._denied("Create organizer", access)

        checked = check_organizer_payload(data)
        if not checked:
            return self._denied("Create organizer", checked)

        outcome = await self._call(
            "Create organizer",
            self.authority.create_organizer(self.auth.token, checked.value),
            parse=self._merge_account,
        )
        if not outcome:
            return outcome

        organizer = outcome.value
        self.cache.invalidate(ORGANIZERS)
        logger.info(f"Created organizer {organizer.id} <{organizer.email}>")
        return Outcome.success(organizer)

    async def set_organizer_status(self, organizer_id: str, active: bool) -> Outcome[Account]:
        """Activate or deactivate an organizer.

        The cached account flips immediately and is rolled back if the call
        fails or is cancelled.
        """
        action = f"{'Activate' if active else 'Deactivate'} organizer {organizer_id}"
        access = check_admin(self.principal, "Changing organizer status")
        if not access:
            return self._denied(action, access)

        async with self._lock(ORGANIZERS, organizer_id):
            previous = self.cache.get(ORGANIZERS, organizer_id)
            optimistic = None
            if previous is not None:
                optimistic = self.cache.put(ORGANIZERS, replace(previous, is_active=active))

            try:
                outcome = await self._call(
                    action,
                    self.authority.set_organizer_status(self.auth.token, organizer_id, active),
                    parse=self._merge_account,
                )
            except asyncio.CancelledError:
                self._rollback(organizer_id, previous, optimistic)
                raise

            if not outcome:
                self._rollback(organizer_id, previous, optimistic)
                self._forget(ORGANIZERS, organizer_id, outcome)
                return outcome

            organizer = outcome.value
            self.auth.update_principal(organizer)
            logger.info(f"{action}: isActive={organizer.is_active}")
            return Outcome.success(organizer)

    def _rollback(
        self, organizer_id: str, previous: Optional[Account], optimistic: Optional[Account]
    ) -> None:
        # Only undo our own placeholder, not data merged meanwhile
        if optimistic is not None and self.cache.get(ORGANIZERS, organizer_id) is optimistic:
            self.cache.put(ORGANIZERS, previous)
            logger.debug(f"Rolled back status of organizer {organizer_id}")

    # ========== Sessions ==========

    async def login(
        self, email: str, password: str, require_admin: bool = False
    ) -> Outcome[Dict[str, Any]]:
        """Start a session.

        Returns the authority's answer: ``{"otpChallenge": ...}`` when a
        one-time code must be verified next, or ``{"token": ...}`` when the
        session is established right away.
        """
        outcome = await self._call("Login", self.authority.login(email, password))
        if not outcome:
            return outcome

        answer = dict(outcome.value or {})
        if answer.get("token"):
            established = self._establish(answer, require_admin)
            if not established:
                return established
        return Outcome.success(answer)

    async def verify_otp(
        self, email: str, code: str, require_admin: bool = False
    ) -> Outcome[Account]:
        """Complete a login with the one-time code sent to ``email``."""
        outcome = await self._call("Verify code", self.authority.verify_otp(email, code))
        if not outcome:
            return outcome

        answer = dict(outcome.value or {})
        if not isinstance(answer.get("user"), dict):
            return Outcome.failure(
                ErrorKind.VALIDATION_FAILED, "The authority did not return the signed-in user"
            )
        return self._establish(answer, require_admin)

    def _establish(self, answer: Dict[str, Any], require_admin: bool) -> Outcome[Optional[Account]]:
        if not answer.get("token"):
            return Outcome.failure(ErrorKind.VALIDATION_FAILED, "The authority issued no token")
        user = answer.get("user")
        principal = Account.from_dict(user) if isinstance(user, dict) else None

        if principal is not None:
            access = (
                check_admin(principal, "Administrator sign-in")
                if require_admin
                else check_signed_in(principal)
            )
            if not access:
                return self._denied(f"Sign-in of {principal.email}", access)
        elif require_admin:
            return Outcome.failure(
                ErrorKind.OWNERSHIP_VIOLATION, "Administrator sign-in needs the user's role"
            )

        self.auth.set_session(answer["token"], principal)
        return Outcome.success(principal)

    async def logout(self) -> Outcome[None]:
        """End the session. Local state is cleared even if the call fails."""
        token = self.auth.token
        outcome = await self._call("Logout", self.authority.logout(token))
        self.auth.clear()
        self.cache.clear()
        return outcome if not outcome else Outcome.success(None)

    # ========== Helpers for callers ==========

    def team_lookup(self, team_id: str) -> Optional[Team]:
        """Cache getter suitable for :meth:`Ref.resolve`."""
        return self.cache.get(TEAMS, team_id)

    def cached_tournament(self, tournament_id: Any) -> Optional[Tournament]:
        return self.cache.get(TOURNAMENTS, raw_id(tournament_id))

    def squad_slots(self, team: Any) -> List[Player]:
        """Squad editor rows for a team or team id, padded with blank rows
        up to ``default_squad_slots``."""
        if not isinstance(team, Team):
            team = self.team_lookup(raw_id(team))
        return squad_slots(team, self.config.default_squad_slots)
