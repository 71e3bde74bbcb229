"""trickfilm/assets.py — Asset arena and handles.

Clips, atlases and clip sets are stored in ``Assets`` tables and referenced by
lightweight ``Handle`` values. Players keep handles, never the assets
themselves, so clip storage can be reloaded or freed independently.
"""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field
from typing import Generic, Iterator, TypeVar

T = TypeVar("T")

# Ids are unique across every table; 0 is reserved for the default handle.
_next_id = itertools.count(1)


# ---------------------------------------------------------------------------
# Handle
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Handle:
    """Opaque reference to an asset, compared by asset id only.

    A strong handle accounts for one reference in its table; a weak handle
    does not keep the asset alive.
    """

    id: int
    strong: bool = field(default=True, compare=False)

    @classmethod
    def default(cls) -> Handle:
        """Weak handle that never resolves to an asset."""
        return cls(0, strong=False)

    def clone_weak(self) -> Handle:
        return Handle(self.id, strong=False)

    def is_weak(self) -> bool:
        return not self.strong


# ---------------------------------------------------------------------------
# Assets
# ---------------------------------------------------------------------------

class Assets(Generic[T]):
    """Indexed table of assets owned by the asset layer."""

    def __init__(self) -> None:
        self._assets: dict[int, T] = {}
        self._strong_counts: dict[int, int] = {}

    def add(self, asset: T) -> Handle:
        """Store *asset* and return the first strong handle to it."""
        asset_id = next(_next_id)
        self._assets[asset_id] = asset
        self._strong_counts[asset_id] = 1
        return Handle(asset_id)

    def insert(self, handle: Handle, asset: T) -> None:
        """Replace (or restore) the asset behind *handle*, keeping its id."""
        self._assets[handle.id] = asset
        self._strong_counts.setdefault(handle.id, 1 if handle.strong else 0)

    def get(self, handle: Handle) -> T | None:
        return self._assets.get(handle.id)

    def contains(self, handle: Handle) -> bool:
        return handle.id in self._assets

    def __contains__(self, handle: object) -> bool:
        return isinstance(handle, Handle) and self.contains(handle)

    def clone_strong(self, handle: Handle) -> Handle:
        """Return a new strong handle, adding a reference to the asset."""
        if handle.id in self._assets:
            self._strong_counts[handle.id] = self._strong_counts.get(handle.id, 0) + 1
        return Handle(handle.id)

    def strong_count(self, handle: Handle) -> int:
        return self._strong_counts.get(handle.id, 0)

    def release(self, handle: Handle) -> T | None:
        """Drop one strong reference; returns the asset if it was freed.

        Releasing a weak handle does nothing.
        """
        if handle.is_weak() or handle.id not in self._assets:
            return None
        count = self._strong_counts.get(handle.id, 0) - 1
        if count > 0:
            self._strong_counts[handle.id] = count
            return None
        return self.remove(handle)

    def remove(self, handle: Handle) -> T | None:
        """Unconditionally remove the asset behind *handle*."""
        self._strong_counts.pop(handle.id, None)
        return self._assets.pop(handle.id, None)

    def __len__(self) -> int:
        return len(self._assets)

    def __iter__(self) -> Iterator[tuple[Handle, T]]:
        for asset_id, asset in list(self._assets.items()):
            yield Handle(asset_id, strong=False), asset
