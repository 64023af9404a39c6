"""Reference-or-value fields.

The authority returns foreign keys either as a bare id or, when it
"populates" them, as the full nested document. Both forms are normalized to
a :class:`Ref` before anything else looks at them.
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

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, TypeVar

T = TypeVar("T")


def raw_id(raw: Any) -> Optional[str]:
    """Extract the id from a bare id, a wire document, a Ref or an entity."""
    if raw is None:
        return None
    if isinstance(raw, Ref):
        return raw.id
    if isinstance(raw, str):
        return raw or None
    if isinstance(raw, dict):
        value = raw.get("_id", raw.get("id"))
        return str(value) if value else None
    value = getattr(raw, "id", None)
    return str(value) if value else None


@dataclass(frozen=True)
class Ref(Generic[T]):
    """A foreign key that may or may not carry the populated entity.

    Attributes
    ----------
    id : str
        Identifier of the referenced entity, always present.
    value : T or None
        The populated entity when the authority returned one.
    """

    id: str
    value: Optional[T] = None

    @property
    def kind(self) -> str:
        """``"value"`` when populated, ``"id"`` otherwise."""
        return "value" if self.value is not None else "id"

    @property
    def is_populated(self) -> bool:
        return self.value is not None

    def resolve(self, lookup: Optional[Callable[[str], Optional[T]]] = None) -> Optional[T]:
        """Return the referenced entity.

        The populated value wins; otherwise ``lookup`` (typically a cache
        getter) is asked for the id. None when neither knows it.
        """
        if self.value is not None:
            return self.value
        if lookup is not None:
            return lookup(self.id)
        return None

    def as_id(self) -> "Ref[T]":
        """Drop the populated value, keeping only the id."""
        return Ref(self.id)

    def matches(self, other: Any) -> bool:
        """Whether ``other`` (id, document, Ref or entity) has the same id."""
        return raw_id(other) == self.id

    @classmethod
    def of(cls, entity: T) -> "Ref[T]":
        """Build a populated reference from an entity with an ``id``."""
        entity_id = raw_id(entity)
        if entity_id is None:
            raise ValueError(f"Cannot reference an entity without an id: {entity!r}")
        return cls(entity_id, entity)

    @classmethod
    def parse(
        cls, raw: Any, factory: Optional[Callable[[dict], T]] = None
    ) -> Optional["Ref[T]"]:
        """Normalize a wire foreign key.

        Args:
            raw: Bare id, populated document, existing Ref or None
            factory: Builds the entity from a populated document

        Returns:
            A Ref, or None when ``raw`` carries no id
        """
        if raw is None:
            return None
        if isinstance(raw, Ref):
            return raw
        entity_id = raw_id(raw)
        if entity_id is None:
            return None
        if isinstance(raw, dict):
            # A document with nothing but its id is not a populated value
            populated = set(raw) - {"_id", "id"}
            if populated and factory is not None:
                return cls(entity_id, factory(raw))
            return cls(entity_id)
        if isinstance(raw, str):
            return cls(entity_id)
        return cls(entity_id, raw)

    @classmethod
    def parse_many(
        cls, raws: Any, factory: Optional[Callable[[dict], T]] = None
    ) -> List["Ref[T]"]:
        """Normalize a list of foreign keys, skipping entries without an id
        and keeping the first occurrence of each id."""
        refs: List[Ref[T]] = []
        seen = set()
        for raw in raws or []:
            ref = cls.parse(raw, factory)
            if ref is None or ref.id in seen:
                continue
            seen.add(ref.id)
            refs.append(ref)
        return refs


def ref_ids(refs: List[Ref[Any]]) -> List[str]:
    return [ref.id for ref in refs]
