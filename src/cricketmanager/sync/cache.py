"""Local cache of authority state.

Entities are stored by id per collection. Listing results are kept as
snapshots of ids keyed by ``(collection, key)``, where the key is the scope
(``all``/``mine``) for tournaments and teams, or the tournament id for
matches. Snapshots are invalidated wholesale after any mutation that could
affect them.

Each collection and each snapshot key carry an epoch counter. A listing
fetch records the epoch before awaiting the authority and may only store
its result if no invalidation happened in between, so a slow fetch cannot
bring back data a later write has made stale.
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

from typing import Any, Dict, Hashable, Iterable, List, Optional, Tuple

from cricketmanager.utils import setup_logger

logger = setup_logger(__name__)

TOURNAMENTS = "tournaments"
TEAMS = "teams"
MATCHES = "matches"
ORGANIZERS = "organizers"

COLLECTIONS = (TOURNAMENTS, TEAMS, MATCHES, ORGANIZERS)

# Key of the organizer listing, which has no scope
ALL = "all"

SnapshotKey = Tuple[str, Hashable]
Epoch = Tuple[int, int]


class EntityCache:
    """Entity and listing cache owned by a single sync client.

    Nothing else writes to it. Readers get the stored objects, which are
    replaced, never mutated in place.
    """

    def __init__(self):
        self._entities: Dict[str, Dict[str, Any]] = {name: {} for name in COLLECTIONS}
        self._snapshots: Dict[SnapshotKey, List[str]] = {}
        self._collection_epochs: Dict[str, int] = {name: 0 for name in COLLECTIONS}
        self._key_epochs: Dict[SnapshotKey, int] = {}

    # ========== Entities ==========

    def get(self, collection: str, entity_id: Optional[str]) -> Optional[Any]:
        if entity_id is None:
            return None
        return self._entities[collection].get(entity_id)

    def put(self, collection: str, entity: Any) -> Any:
        """Store an authoritative entity, replacing any previous copy."""
        self._entities[collection][entity.id] = entity
        return entity

    def put_many(self, collection: str, entities: Iterable[Any]) -> None:
        for entity in entities:
            self.put(collection, entity)

    def remove(self, collection: str, entity_id: str) -> Optional[Any]:
        """Drop an entity and its id from every snapshot of the collection."""
        removed = self._entities[collection].pop(entity_id, None)
        for (name, _), ids in self._snapshots.items():
            if name == collection and entity_id in ids:
                ids.remove(entity_id)
        return removed

    def values(self, collection: str) -> List[Any]:
        return list(self._entities[collection].values())

    # ========== Listing snapshots ==========

    def epoch(self, collection: str, key: Hashable = ALL) -> Epoch:
        return (
            self._collection_epochs[collection],
            self._key_epochs.get((collection, key), 0),
        )

    def snapshot(self, collection: str, key: Hashable = ALL) -> Optional[List[Any]]:
        """Entities of a cached listing in authority order, None when absent."""
        ids = self._snapshots.get((collection, key))
        if ids is None:
            return None
        entities = self._entities[collection]
        return [entities[i] for i in ids if i in entities]

    def store_snapshot(
        self,
        collection: str,
        key: Hashable,
        entities: Iterable[Any],
        epoch: Epoch,
    ) -> bool:
        """Store a listing fetched while the epoch was ``epoch``.

        Returns False, storing nothing, when the snapshot was invalidated
        while the fetch was in flight.
        """
        if self.epoch(collection, key) != epoch:
            logger.debug(f"Discarding stale {collection} listing for {key!r}")
            return False
        entities = list(entities)
        self.put_many(collection, entities)
        self._snapshots[(collection, key)] = [e.id for e in entities]
        return True

    def append_to_snapshot(self, collection: str, key: Hashable, entity: Any) -> None:
        """Store ``entity`` and append it to a cached listing, if there is one."""
        self.put(collection, entity)
        ids = self._snapshots.get((collection, key))
        if ids is not None and entity.id not in ids:
            ids.append(entity.id)

    def invalidate(self, collection: str, key: Optional[Hashable] = None) -> None:
        """Drop one listing snapshot, or every snapshot of the collection."""
        if key is None:
            self._collection_epochs[collection] += 1
            for target in [k for k in self._snapshots if k[0] == collection]:
                del self._snapshots[target]
        else:
            target = (collection, key)
            self._key_epochs[target] = self._key_epochs.get(target, 0) + 1
            self._snapshots.pop(target, None)
        logger.debug(f"Invalidated {collection} listing {key if key is not None else '*'}")

    def clear(self) -> None:
        """Forget everything, e.g. after sign-out."""
        for name in COLLECTIONS:
            self._entities[name].clear()
            self.invalidate(name)
