"""String-level classification of Swift type expressions.

Shapes are detected with an ordered list of prefix/suffix/exact-match rules
rather than a type grammar. Callers only depend on ``classify``.
"""

import re
from collections.abc import Callable, Mapping

from swift_mockgen.core.tables import (
    COLLECTION_NAMES,
    DEFAULT_VALUES,
    OPTIONAL_MARKERS,
    REACTIVE_STREAM_PREFIXES,
    UNKNOWN_TYPE,
)
from swift_mockgen.models import TypeShape

_COLLECTION_PATTERN = re.compile(rf"^(?:Swift\.)?(?:{'|'.join(COLLECTION_NAMES)})(?:\s*<|$)")
_NON_ALPHANUMERIC = re.compile(r"[\W_]+")

_Rule = tuple[Callable[[str, Mapping[str, str]], bool], TypeShape]


def _is_optional(raw_type: str, table: Mapping[str, str]) -> bool:
    return raw_type.endswith(OPTIONAL_MARKERS)


def _is_reactive_stream(raw_type: str, table: Mapping[str, str]) -> bool:
    return raw_type.startswith(REACTIVE_STREAM_PREFIXES)


def _is_collection(raw_type: str, table: Mapping[str, str]) -> bool:
    if raw_type.startswith("[") and raw_type.endswith("]"):
        return True
    return _COLLECTION_PATTERN.match(raw_type) is not None


def _is_primitive(raw_type: str, table: Mapping[str, str]) -> bool:
    return raw_type in table


# Order matters: an optional collection must classify as optional.
_RULES: tuple[_Rule, ...] = (
    (_is_optional, TypeShape.OPTIONAL),
    (_is_reactive_stream, TypeShape.REACTIVE_STREAM),
    (_is_collection, TypeShape.COLLECTION),
    (_is_primitive, TypeShape.PRIMITIVE),
)


def classify(raw_type: str, table: Mapping[str, str] = DEFAULT_VALUES) -> TypeShape:
    type_name = raw_type.strip()
    if not type_name:
        return TypeShape.UNKNOWN
    for predicate, shape in _RULES:
        if predicate(type_name, table):
            return shape
    return TypeShape.UNKNOWN


def unwrap_optional(raw_type: str) -> str:
    """Strip one optional marker, and the parentheses around a wrapped closure type."""
    type_name = raw_type.strip()
    if not type_name.endswith(OPTIONAL_MARKERS):
        return type_name
    inner = type_name[:-1].strip()
    if inner.startswith("(") and inner.endswith(")") and _closes_at_end(inner):
        inner = inner[1:-1].strip()
    return inner


def wrapped_shape(raw_type: str, table: Mapping[str, str] = DEFAULT_VALUES) -> TypeShape | None:
    """Shape of an optional's payload, or None when ``raw_type`` is not optional.

    Only one level is unwrapped; an optional of an optional is unknown.
    """
    if classify(raw_type, table) is not TypeShape.OPTIONAL:
        return None
    inner = unwrap_optional(raw_type)
    shape = classify(inner, table)
    if shape is TypeShape.OPTIONAL:
        return TypeShape.UNKNOWN
    return shape


def capitalize_first_letter(text: str) -> str:
    return text[:1].upper() + text[1:]


def display_name(raw_type: str) -> str:
    """Turn a type expression into an identifier fragment.

    ``[String: Observable<Int>]?`` becomes ``StringObservableInt``.
    """
    parts: list[str] = []
    for component in _NON_ALPHANUMERIC.split(raw_type):
        if not component:
            continue
        capitalized = capitalize_first_letter(component)
        if capitalized == UNKNOWN_TYPE:
            continue
        parts.append(capitalized)
    return "".join(parts)


def _closes_at_end(text: str) -> bool:
    depth = 0
    for index, char in enumerate(text):
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0 and index != len(text) - 1:
                return False
    return depth == 0
