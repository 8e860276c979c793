"""Active section filters."""

from collections.abc import Iterable, Iterator

from .models import FilterKey


class ActiveFilters:
    """Set of filter keys whose sections are shown.

    The set can never become empty: removing the last remaining key is a
    no-op.
    """

    def __init__(self, keys: Iterable[FilterKey] | None = None) -> None:
        initial = list(FilterKey) if keys is None else [FilterKey(k) for k in keys]
        if not initial:
            raise ValueError("ActiveFilters requires at least one key")
        # Dict keeps insertion order for stable iteration
        self._keys: dict[FilterKey, None] = dict.fromkeys(initial)

    def __contains__(self, key: object) -> bool:
        return key in self._keys

    def __iter__(self) -> Iterator[FilterKey]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"ActiveFilters({[k.value for k in self._keys]})"

    def add(self, key: FilterKey) -> None:
        self._keys[FilterKey(key)] = None

    def discard(self, key: FilterKey) -> bool:
        """Remove a key unless it is the last one.

        Returns:
            True if the key was removed
        """
        key = FilterKey(key)
        if key not in self._keys or len(self._keys) == 1:
            return False
        del self._keys[key]
        return True

    def toggle(self, key: FilterKey) -> bool:
        """Flip a key on or off.

        Returns:
            Whether the key is active after the call
        """
        key = FilterKey(key)
        if key in self._keys:
            self.discard(key)
        else:
            self.add(key)
        return key in self._keys

    def as_set(self) -> frozenset[FilterKey]:
        return frozenset(self._keys)
