"""Named per-element attribute arrays that grow and shrink together."""

from __future__ import annotations

import copy
from typing import Any, Generic, Iterator, TypeVar

from halfmesh.handles import Handle

__all__ = ["Property", "PropertyContainer"]

T = TypeVar("T")


def _index(key: Handle | int) -> int:
    return key.idx if isinstance(key, Handle) else int(key)


class Property(Generic[T]):
    """One named array of values, one entry per element.

    Entries are looked up by handle or by plain integer index.
    """

    __slots__ = ("name", "default", "_data")

    def __init__(self, name: str, default: T, size: int = 0) -> None:
        self.name = name
        self.default = default
        self._data: list[T] = [copy.copy(default) for _ in range(size)]

    def vector(self) -> list[T]:
        """Return the underlying list of values (not a copy)."""
        return self._data

    def __getitem__(self, key: Handle | int) -> T:
        return self._data[_index(key)]

    def __setitem__(self, key: Handle | int, value: T) -> None:
        self._data[_index(key)] = value

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self) -> Iterator[T]:
        return iter(self._data)

    def __repr__(self) -> str:
        return f"Property({self.name!r}, size={len(self._data)})"

    def _grow(self) -> None:
        self._data.append(copy.copy(self.default))

    def _resize(self, n: int) -> None:
        if n < len(self._data):
            del self._data[n:]
        else:
            self._data.extend(
                copy.copy(self.default) for _ in range(n - len(self._data))
            )

    def _swap(self, i0: int, i1: int) -> None:
        data = self._data
        data[i0], data[i1] = data[i1], data[i0]


class PropertyContainer:
    """A set of uniquely named properties that all have the same length."""

    def __init__(self) -> None:
        self._props: dict[str, Property[Any]] = {}
        self._size = 0

    def __len__(self) -> int:
        return self._size

    def __contains__(self, name: object) -> bool:
        return name in self._props

    def add(self, name: str, default: Any = None) -> Property[Any]:
        """Add a property filled with copies of ``default``.

        Raises ValueError if a property of that name already exists.
        """
        if name in self._props:
            raise ValueError(f"property {name!r} already exists")
        prop: Property[Any] = Property(name, default, self._size)
        self._props[name] = prop
        return prop

    def get(self, name: str) -> Property[Any] | None:
        """Return the property called ``name``, or None if there is none."""
        return self._props.get(name)

    def get_or_add(self, name: str, default: Any = None) -> Property[Any]:
        """Return the property called ``name``, adding it if it is missing."""
        prop = self._props.get(name)
        return prop if prop is not None else self.add(name, default)

    def remove(self, prop: Property[Any] | str) -> None:
        """Remove a property, given itself or its name; unknown ones are ignored."""
        if isinstance(prop, str):
            self._props.pop(prop, None)
            return
        if self._props.get(prop.name) is prop:
            del self._props[prop.name]

    def exists(self, name: str) -> bool:
        """Return whether a property called ``name`` exists."""
        return name in self._props

    def properties(self) -> list[str]:
        """Return the names of all properties in the order they were added."""
        return list(self._props)

    def resize(self, n: int) -> None:
        """Set the length of every property to ``n``."""
        if n < 0:
            raise ValueError(f"negative size: {n}")
        for prop in self._props.values():
            prop._resize(n)
        self._size = n

    def push_back(self) -> None:
        """Append one default entry to every property."""
        for prop in self._props.values():
            prop._grow()
        self._size += 1

    def swap(self, i0: int, i1: int) -> None:
        """Exchange entries ``i0`` and ``i1`` in every property."""
        for prop in self._props.values():
            prop._swap(i0, i1)

    def clear(self) -> None:
        """Remove all properties and reset the length to zero."""
        self._props.clear()
        self._size = 0

    def copy(self) -> PropertyContainer:
        """Return a deep copy with independent properties and values."""
        other = PropertyContainer()
        other._size = self._size
        for name, prop in self._props.items():
            clone: Property[Any] = Property(name, copy.deepcopy(prop.default))
            clone._data = copy.deepcopy(prop._data)
            other._props[name] = clone
        return other