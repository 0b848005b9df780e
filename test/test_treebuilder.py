"""Tests for folding parse events into a schema tree."""

import os
import sys
import unittest
import xml.etree.ElementTree as ET

current_script_path = os.path.abspath(__file__)
project_root = os.path.dirname(os.path.dirname(current_script_path))
sys.path.append(project_root)

from xml2ecl.common import TEXT_FIELD_NAME
from xml2ecl.schematree import LeafSlot, SchemaNode, ShapeMismatchError, get_or_insert
from xml2ecl.treebuilder import (
    Characters,
    EndDocument,
    EndElement,
    StartDocument,
    StartElement,
    TreeBuilder,
    UnknownEventError,
    build_schema_tree,
)
from xml2ecl.typelattice import PrimitiveType
from xml2ecl.xmlevents import ResourceError, _flush_text, iter_xml_string_events


class TestGetOrInsert(unittest.TestCase):
    """Test cases for slot reuse."""

    def test_creates_and_reuses(self):
        mapping = {}
        node = get_or_insert(mapping, 'a', SchemaNode)
        self.assertIsInstance(node, SchemaNode)
        self.assertIs(get_or_insert(mapping, 'a', SchemaNode), node)
        leaf = get_or_insert(mapping, 'b', LeafSlot)
        self.assertIs(get_or_insert(mapping, 'b', LeafSlot), leaf)

    def test_reuses_empty_leaf(self):
        mapping = {}
        leaf = get_or_insert(mapping, 'b', LeafSlot)
        self.assertEqual(len(leaf), 0)
        self.assertIs(get_or_insert(mapping, 'b', LeafSlot), leaf)

    def test_shape_mismatch(self):
        mapping = {'a': LeafSlot()}
        with self.assertRaises(ShapeMismatchError) as ctx:
            get_or_insert(mapping, 'a', SchemaNode)
        self.assertEqual(ctx.exception.name, 'a')
        self.assertEqual(ctx.exception.expected, 'structure')
        self.assertEqual(ctx.exception.found, 'scalar')

        mapping = {'a': SchemaNode()}
        with self.assertRaises(ShapeMismatchError) as ctx:
            get_or_insert(mapping, 'a', LeafSlot)
        self.assertEqual(ctx.exception.expected, 'scalar')
        self.assertEqual(ctx.exception.found, 'structure')
        self.assertIn("'a'", str(ctx.exception))


class TestTreeBuilder(unittest.TestCase):
    """Test cases for the tree builder."""

    def test_events(self):
        events = [
            StartDocument(),
            StartElement('root', [('id', '7')]),
            Characters('  \n  '),
            StartElement('child'),
            Characters(' 42 '),
            EndElement('child'),
            StartElement('child', [('flag', 'true')]),
            Characters('-3'),
            EndElement('child'),
            EndElement('root'),
            EndDocument(),
        ]
        root = TreeBuilder().ingest(events)

        self.assertEqual(list(root.children), ['root'])
        node = root.children['root']
        self.assertEqual(list(node.attributes), ['id'])
        self.assertEqual(node.attributes['id'].tags, [PrimitiveType.POS_NUMBER])
        # whitespace-only character data is not recorded
        self.assertEqual(list(node.children), ['child'])

        child = node.children['child']
        self.assertEqual(child.children[TEXT_FIELD_NAME].tags,
                         [PrimitiveType.POS_NUMBER, PrimitiveType.NEG_NUMBER])
        self.assertEqual(child.attributes['flag'].tags, [PrimitiveType.BOOLEAN])

    def test_character_data_accumulates(self):
        events = [
            StartElement('a'), Characters('x'), StartElement('b'), EndElement('b'),
            Characters('1.5'), EndElement('a'),
        ]
        root = TreeBuilder().ingest(events)
        slot = root.children['a'].children[TEXT_FIELD_NAME]
        self.assertEqual(slot.tags, [PrimitiveType.STRING, PrimitiveType.FLOAT])

    def test_stops_at_end_document(self):
        events = [StartElement('a'), EndElement('a'), EndDocument(), StartElement('ignored')]
        root = TreeBuilder().ingest(events)
        self.assertEqual(list(root.children), ['a'])

    def test_unknown_event(self):
        with self.assertRaises(UnknownEventError):
            TreeBuilder().ingest([StartElement('a'), 'not an event'])

    def test_unmatched_end_element(self):
        with self.assertRaises(UnknownEventError):
            TreeBuilder().ingest([EndElement('a')])

    def test_documents_merge_into_same_root(self):
        first = [StartElement('a', [('n', '1')]), EndElement('a')]
        second = [StartElement('a', [('n', '-1'), ('m', 'x')]), EndElement('a')]
        root = build_schema_tree([first, second])
        node = root.children['a']
        self.assertEqual(node.attributes['n'].tags, [PrimitiveType.BOOLEAN, PrimitiveType.NEG_NUMBER])
        self.assertEqual(node.attributes['m'].tags, [PrimitiveType.STRING])

    def test_existing_root_is_extended(self):
        root = SchemaNode()
        build_schema_tree([[StartElement('a'), EndElement('a')]], root)
        build_schema_tree([[StartElement('b'), EndElement('b')]], root)
        self.assertEqual(list(root.children), ['a', 'b'])

    def test_repeated_siblings_share_node(self):
        root = TreeBuilder().ingest(iter_xml_string_events(
            '<list><item>1</item><item>-2</item><item>3.5</item></list>'))
        items = root.children['list'].children
        self.assertEqual(list(items), ['item'])
        self.assertEqual(items['item'].children[TEXT_FIELD_NAME].tags,
                         [PrimitiveType.BOOLEAN, PrimitiveType.NEG_NUMBER, PrimitiveType.FLOAT])

    def test_shape_mismatch_across_documents(self):
        builder = TreeBuilder()
        builder.ingest(iter_xml_string_events('<a><_data>1</_data></a>'))
        with self.assertRaises(ShapeMismatchError) as ctx:
            builder.ingest(iter_xml_string_events('<a>text</a>'))
        self.assertEqual(ctx.exception.name, TEXT_FIELD_NAME)

    def test_shape_mismatch_within_document(self):
        with self.assertRaises(ShapeMismatchError):
            TreeBuilder().ingest(iter_xml_string_events('<a><_data/>text</a>'))


class TestXmlEvents(unittest.TestCase):
    """Test cases for the XML event source."""

    def test_event_sequence(self):
        events = list(iter_xml_string_events('<r a="1">t<c/>tail</r>'))
        self.assertIsInstance(events[0], StartDocument)
        self.assertEqual(events[1], StartElement('r', [('a', '1')]))
        self.assertEqual(events[2], Characters('t'))
        self.assertEqual(events[3], StartElement('c', []))
        self.assertEqual(events[4], EndElement('c'))
        self.assertEqual(events[5], Characters('tail'))
        self.assertEqual(events[6], EndElement('r'))
        self.assertIsInstance(events[7], EndDocument)

    def test_text_in_document_order(self):
        events = iter_xml_string_events('<r>a<x/>b<y/>c<x/>d</r>')
        texts = [e.text for e in events if isinstance(e, Characters)]
        self.assertEqual(texts, ['a', 'b', 'c', 'd'])

    def test_finished_children_are_released(self):
        """Children before the one being started are removed once their tail is reported."""
        parent = ET.fromstring('<r>a<x/>b<y/>c<z/></r>')
        started = parent[1]
        texts = [e.text for e in _flush_text(parent, keep=started)]
        self.assertEqual(texts, ['a', 'b'])
        self.assertEqual([child.tag for child in parent], ['y', 'z'])
        self.assertIsNone(parent.text)

        texts = [e.text for e in _flush_text(parent)]
        self.assertEqual(texts, ['c'])
        self.assertEqual(len(parent), 0)

    def test_namespaces_are_stripped(self):
        xml = '<x:r xmlns:x="urn:x" xmlns:y="urn:y" y:a="1"><x:c/></x:r>'
        events = list(iter_xml_string_events(xml))
        self.assertEqual(events[1], StartElement('r', [('a', '1')]))
        self.assertEqual(events[2], StartElement('c', []))

    def test_malformed_document(self):
        with self.assertRaises(ResourceError):
            TreeBuilder().ingest(iter_xml_string_events('<a><b></a>'))


if __name__ == '__main__':
    unittest.main()
