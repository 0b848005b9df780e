"""Primitive type classification and widening for leaf values.

Every raw text value observed in a document is classified into a
PrimitiveType. All types observed for the same field are then joined into
the narrowest type that can represent every one of them.
"""

from enum import Enum
from functools import reduce
from typing import Iterable, Optional


class PrimitiveType(Enum):
    """Primitive type tags, valued by their display names."""
    BOOLEAN = 'Boolean'
    NULL_VALUE = 'NullValue'
    DEFAULT_STRING = 'DefaultString'
    STRING = 'String'
    POS_NUMBER = 'PosNumber'
    NEG_NUMBER = 'NegNumber'
    FLOAT = 'Float'


BOOLEAN_LITERALS = frozenset(['true', 'false', '1', '0'])

# Numeric tags widen along this chain; Boolean sits below the numbers
# because the literals 1 and 0 classify as Boolean.
_NUMERIC_RANK = {
    PrimitiveType.BOOLEAN: 0,
    PrimitiveType.POS_NUMBER: 1,
    PrimitiveType.NEG_NUMBER: 2,
    PrimitiveType.FLOAT: 3,
}

ECL_TYPES = {
    PrimitiveType.BOOLEAN: 'BOOLEAN',
    PrimitiveType.POS_NUMBER: 'UNSIGNED',
    PrimitiveType.NEG_NUMBER: 'INTEGER',
    PrimitiveType.FLOAT: 'REAL',
}

DEFAULT_STRING_TYPE = 'UTF8'


def classify(text: str) -> PrimitiveType:
    """Classify a single (already trimmed) text value."""
    if text == '':
        return PrimitiveType.DEFAULT_STRING
    if text.lower() in BOOLEAN_LITERALS:
        return PrimitiveType.BOOLEAN

    seen_minus = False
    seen_point = False
    result: Optional[PrimitiveType] = None
    for ch in text:
        if ch == '-' and not seen_minus:
            seen_minus = True
            candidate = PrimitiveType.NEG_NUMBER
        elif ch == '.' and not seen_point:
            seen_point = True
            candidate = PrimitiveType.FLOAT
        elif '0' <= ch <= '9':
            candidate = PrimitiveType.POS_NUMBER
        else:
            return PrimitiveType.STRING
        result = join(candidate, result)
    return result


def join(a: PrimitiveType, b: Optional[PrimitiveType] = None) -> PrimitiveType:
    """
    Widen two primitive types into one that can represent both.

    The operation is commutative and associative; joining with None
    returns the other type unchanged.
    """
    if b is None or a == b:
        return a
    if PrimitiveType.DEFAULT_STRING in (a, b):
        return PrimitiveType.DEFAULT_STRING
    if a in _NUMERIC_RANK and b in _NUMERIC_RANK:
        return a if _NUMERIC_RANK[a] > _NUMERIC_RANK[b] else b
    return PrimitiveType.STRING


def reduce_tags(tags: Iterable[PrimitiveType]) -> PrimitiveType:
    """Fold join over every observed tag."""
    return reduce(lambda acc, tag: join(tag, acc), tags, None) or PrimitiveType.DEFAULT_STRING


def display_type(tags: PrimitiveType | Iterable[PrimitiveType], string_type: str = DEFAULT_STRING_TYPE) -> str:
    """Map a tag, or the reduction of a set of tags, to its ECL type keyword."""
    if not isinstance(tags, PrimitiveType):
        tags = reduce_tags(tags)
    return ECL_TYPES.get(tags, string_type)


def describe_ambiguity(tags: Iterable[PrimitiveType]) -> Optional[str]:
    """
    Describe a field whose observed values disagree on their type.

    Returns a comment listing every observed tag in encounter order when more
    than one tag was observed, or when the field only ever held empty values.
    Otherwise returns None. Numeric widenings such as Boolean, Float are
    described as well, even though they still map to a numeric ECL type.
    """
    tags = list(tags)
    if len(tags) > 1 or tags == [PrimitiveType.NULL_VALUE]:
        return ', '.join(tag.value for tag in tags)
    return None
