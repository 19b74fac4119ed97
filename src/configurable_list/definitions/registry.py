"""Two-layer definition registries.

A list definition owns a static layer shared by every instance of the
definition. Each instance adds a dynamic layer on top of it. Merged views
are cached and dropped whenever the dynamic layer changes.
"""

from types import MappingProxyType
from typing import Dict, Generic, List, Mapping, Optional, Sequence, Tuple, TypeVar

D = TypeVar("D")


class NamedRegistry(Generic[D]):
    """Named definitions (columns or joins); dynamic entries override static ones.

    Merged order follows the static layer, with new dynamic names appended in
    the order they were added.
    """

    def __init__(self, static: Mapping[str, D]):
        self._static = static
        self._dynamic: Dict[str, D] = {}
        self._merged: Optional[Mapping[str, D]] = None

    def add(self, name: str, definition: D) -> None:
        self._dynamic[name] = definition
        self._merged = None

    @property
    def dynamic(self) -> Mapping[str, D]:
        return MappingProxyType(self._dynamic)

    @property
    def merged(self) -> Mapping[str, D]:
        if self._merged is None:
            merged = dict(self._static)
            merged.update(self._dynamic)
            self._merged = MappingProxyType(merged)
        return self._merged

    def get(self, name: str) -> Optional[D]:
        return self.merged.get(name)

    def __len__(self) -> int:
        return len(self.merged)


class OrderedRegistry(Generic[D]):
    """Unnamed definitions (qualifiers); static entries followed by dynamic ones."""

    def __init__(self, static: Sequence[D]):
        self._static = static
        self._dynamic: List[D] = []
        self._merged: Optional[Tuple[D, ...]] = None

    def add(self, definition: D) -> None:
        self._dynamic.append(definition)
        self._merged = None

    @property
    def dynamic(self) -> Tuple[D, ...]:
        return tuple(self._dynamic)

    @property
    def merged(self) -> Tuple[D, ...]:
        if self._merged is None:
            self._merged = tuple(self._static) + tuple(self._dynamic)
        return self._merged

    def __len__(self) -> int:
        return len(self.merged)
