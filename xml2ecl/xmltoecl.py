"""Infers an ECL record layout from XML files.

This module provides:
- convert_xml_to_ecl: Infer ECL RECORD definitions from XML files
- infer_ecl_from_xml: Infer ECL RECORD definitions from XML strings
"""

import logging
import os
import sys
from contextlib import closing
from typing import List, Optional

from xml2ecl.eclemitter import ROOT_NAME, emit_ecl
from xml2ecl.treebuilder import TreeBuilder
from xml2ecl.typelattice import DEFAULT_STRING_TYPE
from xml2ecl.xmlevents import iter_xml_events, iter_xml_file_events, iter_xml_string_events

logger = logging.getLogger(__name__)


def convert_xml_to_ecl(
    input_files: List[str],
    ecl_file: Optional[str] = None,
    string_type: str = DEFAULT_STRING_TYPE,
    type_name: str = ROOT_NAME,
    sample_size: int = 0
) -> str:
    """Infers ECL record definitions from XML files.

    Reads XML files, merges their structure and generates ECL RECORD
    definitions that can describe all of them. Multiple files are analyzed
    together to produce a unified layout. Nothing is written if any file
    fails to parse or the files disagree on the shape of a name.

    Args:
        input_files: List of XML file paths to analyze; '-' reads standard input
        ecl_file: Output path for the ECL definitions (None = return only)
        string_type: ECL type used for string values
        type_name: Name for the root record
        sample_size: Maximum number of documents to sample (0 = all)

    Returns:
        The ECL definitions
    """
    if not input_files:
        raise ValueError("At least one input file is required")

    builder = TreeBuilder()
    for file_path in input_files:
        if sample_size > 0 and builder.documents >= sample_size:
            break
        logger.debug("Reading %s", file_path)
        if file_path == '-':
            builder.ingest(iter_xml_events(sys.stdin.buffer, '<stdin>'))
        else:
            with closing(iter_xml_file_events(file_path)) as events:
                builder.ingest(events)

    ecl = emit_ecl(builder.root, string_type, type_name)

    if ecl_file:
        # Ensure output directory exists
        output_dir = os.path.dirname(ecl_file)
        if output_dir and not os.path.exists(output_dir):
            os.makedirs(output_dir)

        with open(ecl_file, 'w', encoding='utf-8') as f:
            f.write(ecl)
    return ecl


def infer_ecl_from_xml(
    xml_strings: List[str],
    string_type: str = DEFAULT_STRING_TYPE,
    type_name: str = ROOT_NAME
) -> str:
    """Infers ECL record definitions from XML strings.

    Args:
        xml_strings: List of XML documents
        string_type: ECL type used for string values
        type_name: Name for the root record

    Returns:
        The ECL definitions
    """
    builder = TreeBuilder()
    for xml_string in xml_strings:
        builder.ingest(iter_xml_string_events(xml_string))
    return emit_ecl(builder.root, string_type, type_name)
