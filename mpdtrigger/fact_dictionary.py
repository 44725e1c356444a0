"""
Fact dictionary for template rendering.

Maps token names to mutable slots that the MPD glue refreshes before each
render. Renders never read slots directly; they read an immutable snapshot.
"""

from types import MappingProxyType
from typing import Callable, Dict, Iterable, Mapping, Optional, Union

# Names exposed to command templates, in the order they are registered
PLAYBACK_FACT_NAMES = (
    "title",
    "artist",
    "album",
    "track",
    "state",
    "elapsed_time",
    "total_time",
    "elapsed_pct",
)


class FactSlot:
    """Mutable holder for one fact value, updated in place between renders."""

    __slots__ = ("value",)

    def __init__(self, value: Optional[str] = None):
        self.value = value

    def get(self) -> Optional[str]:
        return self.value

    def set(self, value: Optional[str]) -> None:
        self.value = value

    def __repr__(self) -> str:
        return f"FactSlot({self.value!r})"


FactSource = Union[FactSlot, Callable[[], Optional[str]]]


class FactSnapshot(Mapping):
    """Read-only copy of every registered fact at one point in time."""

    def __init__(self, values: Mapping[str, Optional[str]]):
        self._values = MappingProxyType(dict(values))

    def lookup(self, name: str) -> Optional[str]:
        """Return the value for name, or None when not registered or absent."""
        return self._values.get(name)

    def __getitem__(self, name: str) -> Optional[str]:
        return self._values[name]

    def __iter__(self):
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"FactSnapshot({dict(self._values)!r})"


class FactDictionary:
    """Registry of fact names bound to slots or value callables."""

    def __init__(self):
        self._sources: Dict[str, FactSource] = {}

    def register(self, name: str, source: Optional[FactSource] = None) -> FactSource:
        """
        Bind name to a source, shadowing any earlier binding.

        Args:
            name: Token name used inside templates (case-sensitive)
            source: FactSlot or zero-argument callable; a fresh empty slot when omitted

        Returns:
            The bound source
        """
        if source is None:
            source = FactSlot()
        elif not isinstance(source, FactSlot) and not callable(source):
            raise TypeError(f"Fact source for {name!r} must be a FactSlot or callable, got {type(source).__name__}")
        self._sources[name] = source
        return source

    def lookup(self, name: str) -> Optional[str]:
        """Return the current value of name, or None when name is not registered."""
        source = self._sources.get(name)
        if source is None:
            return None
        if isinstance(source, FactSlot):
            return source.value
        return source()

    def slot(self, name: str) -> FactSlot:
        """Return the FactSlot registered under name."""
        source = self._sources[name]
        if not isinstance(source, FactSlot):
            raise TypeError(f"Fact {name!r} is bound to a callable, not a slot")
        return source

    def update(self, values: Mapping[str, Optional[str]]) -> None:
        """Write values into the slots of already registered names."""
        for name, value in values.items():
            self.slot(name).set(value)

    def clear(self) -> None:
        """Reset every slot to absent."""
        for source in self._sources.values():
            if isinstance(source, FactSlot):
                source.set(None)

    def snapshot(self) -> FactSnapshot:
        """Capture an immutable copy of all current values."""
        return FactSnapshot({name: self.lookup(name) for name in self._sources})

    def names(self) -> Iterable[str]:
        return tuple(self._sources)

    def __contains__(self, name: object) -> bool:
        return name in self._sources

    def __len__(self) -> int:
        return len(self._sources)


def create_playback_dictionary() -> FactDictionary:
    """Create a dictionary with every playback fact registered and absent."""
    facts = FactDictionary()
    for name in PLAYBACK_FACT_NAMES:
        facts.register(name)
    return facts
