"""Turns an XML document into the structural events consumed by the tree builder."""

import io
import xml.etree.ElementTree as ET
from typing import IO, Iterator, List, Optional, Union

from xml2ecl.common import Xml2EclError
from xml2ecl.treebuilder import Characters, EndDocument, EndElement, StartDocument, StartElement


class ResourceError(Xml2EclError):
    """Raised when a document cannot be opened or read."""

    def __init__(self, source: str, cause: Exception) -> None:
        self.source = source
        self.cause = cause
        super().__init__(f"Cannot read XML document: {cause}", context=source)


def local_name(tag: str) -> str:
    """Strip the namespace from an element or attribute name."""
    return tag.split('}')[-1] if '}' in tag else tag


def _flush_text(element: ET.Element, keep: Optional[ET.Element] = None) -> Iterator[Characters]:
    """Report the pending text of an element and drop the children before `keep`."""
    if element.text:
        yield Characters(element.text)
        element.text = None
    for child in list(element):
        if child is keep:
            break
        if child.tail:
            yield Characters(child.tail)
        element.remove(child)


def iter_xml_events(stream: IO[bytes], source_name: str = '<stream>') -> Iterator[object]:
    """
    Parse an XML document and yield its structural events.

    Character data is reported in document order: the text of an element
    before its first child, the text following a child once the next child
    starts or the element ends. A child element is removed from its parent as
    soon as the text following it has been reported, so only the open
    elements are kept in memory.

    Args:
        stream: A binary file object holding one XML document
        source_name: Name of the document used in error messages

    Raises:
        ResourceError: If the document cannot be read or is not well-formed
    """
    yield StartDocument()
    open_elements: List[ET.Element] = []
    try:
        for event, element in ET.iterparse(stream, events=('start', 'end')):
            if event == 'start':
                if open_elements:
                    yield from _flush_text(open_elements[-1], keep=element)
                attributes = [(local_name(k), v) for k, v in element.attrib.items()]
                yield StartElement(local_name(element.tag), attributes)
                open_elements.append(element)
                continue
            yield from _flush_text(element)
            yield EndElement(local_name(element.tag))
            open_elements.pop()
    except (OSError, ET.ParseError) as e:
        raise ResourceError(source_name, e) from e
    yield EndDocument()


def iter_xml_file_events(file_path: str) -> Iterator[object]:
    """Yield the structural events of an XML file, closing it on every exit path."""
    try:
        stream = open(file_path, 'rb')
    except OSError as e:
        raise ResourceError(file_path, e) from e
    with stream:
        yield from iter_xml_events(stream, file_path)


def iter_xml_string_events(xml_string: Union[str, bytes]) -> Iterator[object]:
    """Yield the structural events of an XML document held in memory."""
    if isinstance(xml_string, str):
        xml_string = xml_string.encode('utf-8')
    return iter_xml_events(io.BytesIO(xml_string), '<string>')
