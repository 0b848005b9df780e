"""In-memory schema tree merged from every ingested document."""

from typing import Dict, Iterator, List, Type, Union

from xml2ecl.common import Xml2EclError
from xml2ecl.typelattice import PrimitiveType


class LeafSlot:
    """Distinct primitive types observed for one scalar position, in encounter order."""

    def __init__(self) -> None:
        self.tags: List[PrimitiveType] = []

    def add(self, tag: PrimitiveType) -> None:
        if tag not in self.tags:
            self.tags.append(tag)

    def __iter__(self) -> Iterator[PrimitiveType]:
        return iter(self.tags)

    def __len__(self) -> int:
        return len(self.tags)

    def __repr__(self) -> str:
        return f"LeafSlot({[t.value for t in self.tags]})"


class SchemaNode:
    """A record-like position: attribute slots plus child slots, both keyed by source name."""

    def __init__(self) -> None:
        self.attributes: Dict[str, LeafSlot] = {}
        self.children: Dict[str, Union[LeafSlot, 'SchemaNode']] = {}

    def __repr__(self) -> str:
        return f"SchemaNode(attributes={list(self.attributes)}, children={list(self.children)})"


Slot = Union[LeafSlot, SchemaNode]


def shape_name(kind: Type[Slot]) -> str:
    return 'scalar' if kind is LeafSlot else 'structure'


class ShapeMismatchError(Xml2EclError):
    """
    Raised when the same name is used once as a scalar and once as a nested structure.

    Attributes:
        name: The offending name
        expected: The shape the name was used with now
        found: The shape the name was established with earlier
    """

    def __init__(self, name: str, expected: str, found: str) -> None:
        self.name = name
        self.expected = expected
        self.found = found
        super().__init__(f"Shape mismatch for '{name}': expected {expected}, found {found}", context=name)


def get_or_insert(mapping: Dict[str, Slot], key: str, kind: Type[Slot]) -> Slot:
    """
    Return the slot stored under `key`, creating an empty one of `kind` if absent.

    Args:
        mapping: The attribute or child map of a schema node
        key: The source name
        kind: LeafSlot or SchemaNode

    Returns:
        The existing or newly created slot

    Raises:
        ShapeMismatchError: If the slot already holds the other kind
    """
    slot = mapping.get(key)
    if slot is None:
        slot = kind()
        mapping[key] = slot
    elif not isinstance(slot, kind):
        raise ShapeMismatchError(key, shape_name(kind), shape_name(type(slot)))
    return slot
