from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple


@dataclass(frozen=True)
class Attribute:
    """
    A discrete random variable, i.e. one column of a dataset.

    The network only references attributes; it never owns or mutates them.
    """

    name: str
    values: Tuple[Any, ...]

    @staticmethod
    def create(name: str, values: Iterable[Any]) -> "Attribute":
        vals = tuple(values)
        if len(set(vals)) != len(vals):
            raise ValueError(f"Attribute '{name}' has duplicate values")
        return Attribute(name=name, values=vals)

    @property
    def num_values(self) -> int:
        return len(self.values)

    def index_of(self, value: Any) -> int:
        try:
            return self.values.index(value)
        except ValueError:
            raise KeyError(
                f"Value {value!r} is not a value of attribute '{self.name}'"
            ) from None

    def __repr__(self) -> str:
        return f"Attribute({self.name})"


class AttributeSet:
    """
    Ordered, duplicate-free registry of attributes.
    """

    def __init__(self, attributes: Optional[Iterable[Attribute]] = None) -> None:
        self._attributes: List[Attribute] = []
        self._by_name: Dict[str, Attribute] = {}

        for attr in attributes or []:
            self.add(attr)

    # ------------------------------------------------------------------
    # Mutation
    # ------------------------------------------------------------------

    def add(self, attribute: Attribute) -> None:
        if attribute.name in self._by_name:
            raise ValueError(f"Attribute '{attribute.name}' already registered")
        self._attributes.append(attribute)
        self._by_name[attribute.name] = attribute

    def remove(self, attribute: Attribute) -> None:
        if self._by_name.get(attribute.name) != attribute:
            raise KeyError(attribute.name)
        self._attributes.remove(attribute)
        del self._by_name[attribute.name]

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def get(self, name: str) -> Optional[Attribute]:
        return self._by_name.get(name)

    @property
    def attributes(self) -> List[Attribute]:
        return list(self._attributes)

    @property
    def names(self) -> List[str]:
        return [a.name for a in self._attributes]

    def copy(self) -> "AttributeSet":
        return AttributeSet(self._attributes)

    def __contains__(self, item: object) -> bool:
        if isinstance(item, Attribute):
            return self._by_name.get(item.name) == item
        if isinstance(item, str):
            return item in self._by_name
        return False

    def __iter__(self) -> Iterator[Attribute]:
        return iter(list(self._attributes))

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"AttributeSet({self.names})"
