"""
Common utility functions for xml2ecl.
"""

# pylint: disable=line-too-long

from collections import Counter
import os
import re
from typing import Optional
import jinja2


# Field name under which an element's character data is collected.
TEXT_FIELD_NAME = '_data'

# Suffix appended to every allocated record name.
RECORD_SUFFIX = '_LAYOUT'

ECL_RESERVED_WORDS = frozenset([
    'after', 'all', 'and', 'any', 'as', 'ascii', 'atmost', 'before', 'best',
    'between', 'big_endian', 'boolean', 'case', 'choosen', 'const', 'counter',
    'csv', 'data', 'dataset', 'decimal', 'default', 'dedup', 'descend',
    'distribute', 'ebcdic', 'else', 'elseif', 'embed', 'encrypt', 'end',
    'endc++', 'endembed', 'endmacro', 'enum', 'except', 'exclusive', 'expire',
    'export', 'extend', 'fail', 'false', 'few', 'first', 'flat', 'full',
    'function', 'functionmacro', 'group', 'grouped', 'header', 'heading',
    'hole', 'if', 'ifblock', 'import', 'in', 'inner', 'integer', 'interface',
    'join', 'joined', 'keep', 'keyed', 'last', 'left', 'limit', 'little_endian',
    'load', 'local', 'locale', 'lookup', 'macro', 'many', 'maxcount',
    'maxlength', 'module', 'named', 'nocase', 'noroot', 'noscan', 'nosort',
    'not', 'of', 'only', 'opt', 'or', 'outer', 'overwrite', 'packed',
    'partition', 'penalty', 'physicallength', 'pipe', 'qstring', 'quote',
    'real', 'record', 'recordof', 'repeat', 'return', 'right', 'rows', 'rule',
    'scan', 'self', 'separator', 'service', 'set', 'shared', 'skew', 'skip',
    'sql', 'store', 'string', 'terminator', 'then', 'thor', 'threshold',
    'token', 'transform', 'trim', 'true', 'type', 'unicode', 'unicodeorder',
    'unsigned', 'unsorted', 'utf8', 'validate', 'varstring', 'varunicode',
    'virtual', 'whole', 'wild', 'within', 'xml', 'xpath',
])


class Xml2EclError(Exception):
    """
    Base class for errors raised while inferring an ECL schema.

    Attributes:
        message: Human-readable error description
        context: Optional context about where the error occurred
    """

    def __init__(self, message: str, context: Optional[str] = None) -> None:
        self.message = message
        self.context = context
        full_message = message
        if context:
            full_message = f"{message} (context: {context})"
        super().__init__(full_message)


def sanitize(raw: str, replacement: str = '_', keep: str = '') -> str:
    """
    Replace every character that is not an ASCII letter, a digit, an underscore,
    the replacement character or one of the characters in `keep` with the
    replacement character, then collapse runs of the replacement character.

    Args:
        raw (str): The name to sanitize.
        replacement (str): The single replacement character.
        keep (str): Additional characters that are left as they are.

    Returns:
        str: The sanitized name.
    """
    allowed = re.escape('_' + replacement + keep)
    val = re.sub(f'[^a-zA-Z0-9{allowed}]', replacement, raw)
    return re.sub(f'{re.escape(replacement)}{{2,}}', replacement, val)


def _prefix_name(name: str, prefix: str) -> str:
    """Prefix a name that does not start with a letter."""
    if name.startswith('_'):
        return prefix + name
    return prefix + '_' + name


def _starts_with_letter(name: str) -> bool:
    return bool(name) and name[0].isascii() and name[0].isalpha()


def legal_record_name(raw: str) -> str:
    """Convert a name into a record name stem."""
    val = sanitize(raw).upper()
    if not _starts_with_letter(val):
        val = _prefix_name(val, 'F')
    return val


def legal_field_name(raw: str, is_text: bool = False) -> str:
    """Convert a name into an ECL field name; the character-data field keeps its name."""
    if is_text:
        return raw
    val = sanitize(raw).lower()
    if not _starts_with_letter(val) or val in ECL_RESERVED_WORDS:
        val = _prefix_name(val, 'f')
    return val


def xpath_directive(raw: str, is_attribute: bool = False, is_text: bool = False) -> str:
    """
    Build the XPATH annotation that binds a field to its source element or attribute.

    Args:
        raw (str): The source name.
        is_attribute (bool): Whether the source is an attribute.
        is_text (bool): Whether the field collects the character data of the element itself.

    Returns:
        str: The XPATH directive, e.g. {XPATH('@id')}.
    """
    if is_text:
        return "{XPATH('')}"
    path = sanitize(raw, '*', '-')
    if is_attribute:
        path = '@' + path
    return f"{{XPATH('{path}')}}"


class NameAllocator:
    """
    Hands out record names for one emission pass.

    Every stem that has been issued before is suffixed with its zero-padded
    issuance count, so the first ITEM stays ITEM and the next ones become
    ITEM_002, ITEM_003 and so on.
    """

    def __init__(self) -> None:
        self.issued: Counter = Counter()

    def allocate(self, raw: str) -> str:
        """Allocate the record name for a node reached through `raw`."""
        stem = legal_record_name(raw)
        self.issued[stem] += 1
        count = self.issued[stem]
        if count < 2:
            return stem + RECORD_SUFFIX
        return f"{stem}_{count:03d}{RECORD_SUFFIX}"


def process_template(file_path: str, **kvargs) -> str:
    """
    Process a file as a Jinja2 template with the given object as input.

    Args:
        file_path (str): The path to the template, relative to the package.
        **kvargs: The keyword arguments to pass to the template.

    Returns:
        str: The processed template as a string.
    """
    file_dir = os.path.dirname(__file__)
    template_loader = jinja2.FileSystemLoader(searchpath=file_dir)
    template_env = jinja2.Environment(loader=template_loader)

    template = template_env.get_template(file_path)
    return template.render(**kvargs)
