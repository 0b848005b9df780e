"""Serializes a merged schema tree into ECL RECORD definitions.

Records are emitted bottom-up: every nested record is defined before the
record that references it.
"""

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from xml2ecl.common import NameAllocator, legal_field_name, process_template, xpath_directive
from xml2ecl.schematree import LeafSlot, SchemaNode
from xml2ecl.typelattice import DEFAULT_STRING_TYPE, describe_ambiguity, display_type

logger = logging.getLogger(__name__)

ROOT_NAME = 'toplevel'


@dataclass
class EclField:
    """One field line of a record definition."""
    ecl_type: str
    name: str
    xpath: str
    comment: Optional[str] = None


class EclSchemaEmitter:
    """Emits the ECL record definitions for a schema tree."""

    def __init__(self, string_type: str = DEFAULT_STRING_TYPE) -> None:
        self.string_type = string_type

    def emit(self, root: SchemaNode, root_name: str = ROOT_NAME) -> str:
        """Emit the definitions of the root record and of every record nested in it."""
        allocator = NameAllocator()
        _, text = self.emit_record(root, root_name, allocator)
        return text

    def emit_record(self, node: SchemaNode, reached_by: str, allocator: NameAllocator) -> Tuple[str, str]:
        """
        Emit the definition of one record, preceded by the definitions it depends on.

        Args:
            node: The schema node to emit
            reached_by: The source name the node was reached by
            allocator: The record name allocator of the current pass

        Returns:
            Tuple of (allocated record name, definitions text)
        """
        record_name = allocator.allocate(reached_by)
        definitions: List[str] = []
        fields: List[EclField] = []

        for attr_name, slot in node.attributes.items():
            fields.append(self.leaf_field(attr_name, slot, is_attribute=True))
        for child_name, child in node.children.items():
            if isinstance(child, SchemaNode):
                child_record, child_text = self.emit_record(child, child_name, allocator)
                definitions.append(child_text)
                fields.append(EclField(f"DATASET({child_record})",
                                       legal_field_name(child_name),
                                       xpath_directive(child_name)))
            else:
                # child leaf slots only ever hold character data
                fields.append(self.leaf_field(child_name, child, is_text=True))

        definitions.append(process_template("eclrecord.ecl.jinja",
                                            record_name=record_name,
                                            fields=fields) + "\n\n")
        logger.debug("Emitted record %s with %d fields", record_name, len(fields))
        return record_name, ''.join(definitions)

    def leaf_field(self, name: str, slot: LeafSlot, is_attribute: bool = False, is_text: bool = False) -> EclField:
        """Build the field line of an attribute or of the character data of an element."""
        return EclField(display_type(slot, self.string_type),
                        legal_field_name(name, is_text),
                        xpath_directive(name, is_attribute, is_text),
                        describe_ambiguity(slot))


def emit_ecl(root: SchemaNode, string_type: str = DEFAULT_STRING_TYPE, root_name: str = ROOT_NAME) -> str:
    """Emit the ECL record definitions for a schema tree."""
    return EclSchemaEmitter(string_type).emit(root, root_name)
