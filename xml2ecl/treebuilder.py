"""Folds a stream of structural parse events into a merged schema tree.

The same root node is reused across documents, so repeated structures in
different files widen exactly like repeated siblings within one file.
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from xml2ecl.common import TEXT_FIELD_NAME, Xml2EclError
from xml2ecl.schematree import LeafSlot, SchemaNode, get_or_insert
from xml2ecl.typelattice import classify

logger = logging.getLogger(__name__)


@dataclass
class StartDocument:
    """Start of a document; carries nothing."""


@dataclass
class StartElement:
    """An element start tag together with its attributes."""
    name: str
    attributes: List[Tuple[str, str]] = field(default_factory=list)


@dataclass
class Characters:
    """Character data inside the current element."""
    text: str


@dataclass
class EndElement:
    """An element end tag."""
    name: str = ''


@dataclass
class EndDocument:
    """End of a document."""


class UnknownEventError(Xml2EclError):
    """Raised when the event source produces an event outside its contract."""

    def __init__(self, event: object) -> None:
        self.event = event
        super().__init__(f"Unknown parse event {event!r}")


class TreeBuilder:
    """Builds, and keeps merging into, one schema tree."""

    def __init__(self, root: Optional[SchemaNode] = None) -> None:
        self.root = root if root is not None else SchemaNode()
        self.documents = 0

    def ingest(self, events: Iterable[object]) -> SchemaNode:
        """
        Consume the events of one document and merge them into the root.

        Args:
            events: StartDocument, StartElement, Characters, EndElement and
                EndDocument events in document order

        Returns:
            The root node

        Raises:
            ShapeMismatchError: If a name is used both as a scalar and a structure
            UnknownEventError: If an event of any other type is encountered
        """
        stack: List[SchemaNode] = [self.root]
        for event in events:
            if isinstance(event, StartElement):
                node = get_or_insert(stack[-1].children, event.name, SchemaNode)
                for attr_name, attr_value in event.attributes:
                    get_or_insert(node.attributes, attr_name, LeafSlot).add(classify(attr_value))
                stack.append(node)
            elif isinstance(event, Characters):
                text = event.text.strip()
                if text:
                    get_or_insert(stack[-1].children, TEXT_FIELD_NAME, LeafSlot).add(classify(text))
            elif isinstance(event, EndElement):
                if len(stack) == 1:
                    # unmatched end tag
                    raise UnknownEventError(event)
                stack.pop()
            elif isinstance(event, EndDocument):
                break
            elif isinstance(event, StartDocument):
                continue
            else:
                raise UnknownEventError(event)
        self.documents += 1
        logger.debug("Ingested document %d", self.documents)
        return self.root


def build_schema_tree(documents: Iterable[Iterable[object]], root: Optional[SchemaNode] = None) -> SchemaNode:
    """Fold the event streams of several documents, one after the other, into one tree."""
    builder = TreeBuilder(root)
    for events in documents:
        builder.ingest(events)
    return builder.root
