"""Swift declaration parser built on tree-sitter.

tree-sitter locates protocol, class and struct declarations, their bodies
and their ``attribute`` nodes. Member signatures are read from the source text
of each body child once its attributes are blanked out.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from typing import NamedTuple, cast

from tree_sitter import Node
from tree_sitter_language_pack import SupportedLanguage, get_parser

from swift_mockgen.core.tables import UNKNOWN_TYPE
from swift_mockgen.models import (
    Attribute,
    DeclarationKind,
    MemberKind,
    MemberNode,
    Parameter,
    Structure,
)
from swift_mockgen.source import SourceFile

logger = logging.getLogger(__name__)

LANGUAGE = "swift"

_DECLARATION_NODE_TYPES = frozenset({"protocol_declaration", "class_declaration"})
_DECLARATION_KINDS = {
    "protocol": DeclarationKind.PROTOCOL,
    "class": DeclarationKind.CLASS,
    "struct": DeclarationKind.STRUCT,
}
_ACCESS_LEVELS = ("open", "public", "package", "internal", "fileprivate", "private")
_MODIFIER_NODE_TYPES = frozenset({"attribute", "modifiers"})
# Requirements a mock cannot satisfy, so the generated type will not conform
_UNSUPPORTED_REQUIREMENTS = frozenset({"subscript", "associatedtype"})

_ATTRIBUTE_NAME = re.compile(r"\w+(?:\.\w+)*")
_KIND_PATTERN = re.compile(r"(?<![\w.])(protocol|class|struct|enum|extension|actor)\s+(`[^`]+`|\w+)")
_MEMBER_HEAD = re.compile(
    r"^(?P<prefix>(?:\w+(?:\(\w+\))?\s+)*?)"
    r"(?P<keyword>var|let|func|init|subscript|associatedtype|typealias|case|deinit)\b"
)
_MEMBER_KEYWORD = re.compile(r"\b(?:var|let|func|init|subscript|associatedtype|typealias|case|deinit)\b")
_IDENTIFIER = re.compile(r"^(?:\w+|`[^`]+`)$")
_EFFECTS = re.compile(r"^\s*(?P<async>async\b)?\s*(?P<throwing>throws\b|rethrows\b)?\s*(?:->\s*(?P<returns>.*))?$", re.S)
_WHERE_CLAUSE = re.compile(r"\s+where\s+", re.S)

_OPENERS = "([<"
_CLOSERS = ")]>"


class TreeSitterSwiftParser:
    """Extract mockable declarations from Swift source.

    Implements the ``DeclarationParser`` protocol.
    """

    def __init__(self) -> None:
        self._parser = get_parser(cast(SupportedLanguage, LANGUAGE))

    def parse(self, file: SourceFile) -> list[Structure]:
        tree = self._parser.parse(file.data)
        structures: list[Structure] = []
        for node in _iter_declarations(tree.root_node):
            structure = _build_structure(node, file)
            if structure is not None:
                structures.append(structure)
        return structures


def _iter_declarations(node: Node) -> Iterator[Node]:
    for child in node.children:
        if child.type in _DECLARATION_NODE_TYPES:
            yield child
        yield from _iter_declarations(child)


def _node_text(node: Node, file: SourceFile) -> str:
    return file.data[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def _find_body(node: Node) -> Node | None:
    body = node.child_by_field_name("body")
    if body is not None:
        return body
    for child in node.named_children:
        if child.type.endswith("_body"):
            return child
    return None


def _build_structure(node: Node, file: SourceFile) -> Structure | None:
    start = _declaration_start(file.data, node.start_byte)
    body = _find_body(node)
    end = body.start_byte if body is not None else node.end_byte
    header = file.data[start:end].decode("utf-8", errors="replace")
    if body is None:
        header = header.split("{", 1)[0]

    spans = _scan_attributes(header)
    bare_header = _blank_spans(header, [(s, e) for _, s, e in spans])
    match = _KIND_PATTERN.search(bare_header)
    if match is None or match.group(1) not in _DECLARATION_KINDS:
        return None
    kind = _DECLARATION_KINDS[match.group(1)]
    name = match.group(2).strip("`")

    modifiers = set(re.findall(r"\w+", bare_header[: match.start()]))
    access_level = next((level for level in _ACCESS_LEVELS if level in modifiers), "")

    # Lines above the node are only reachable through the text scan.
    scanned = [
        Attribute(
            kind=attr_name,
            offset=start + len(header[:attr_start].encode("utf-8")),
            length=len(header[attr_start:attr_end].encode("utf-8")),
        )
        for attr_name, attr_start, attr_end in spans
        if attr_start < match.start()
    ]
    from_nodes = [_attribute(attr, file) for attr in _attribute_nodes(node)]
    if from_nodes:
        attributes = [a for a in scanned if a.offset is not None and a.offset < node.start_byte] + from_nodes
    else:
        attributes = scanned

    doc_offset, doc_length = _doc_comment_span(file.data, start)

    members: list[MemberNode] = []
    if body is not None:
        for child in body.named_children:
            if "comment" in child.type or child.type in _MODIFIER_NODE_TYPES:
                continue
            member = parse_member(_member_text(child, file), kind)
            if member is not None:
                members.append(member)

    return Structure(
        name=name,
        kind=kind,
        access_level=access_level,
        doc_offset=doc_offset,
        doc_length=doc_length,
        attributes=attributes,
        members=members,
        inherited_types=_inherited_types(bare_header[match.end() :]),
    )


def _attribute_nodes(node: Node) -> Iterator[Node]:
    """Attributes written on ``node`` itself, not those nested in its parameters or body."""
    for child in node.children:
        if child.type == "attribute":
            yield child
        elif child.type == "modifiers":
            yield from (c for c in child.children if c.type == "attribute")


def _attribute(node: Node, file: SourceFile) -> Attribute:
    name = _ATTRIBUTE_NAME.match(_node_text(node, file).lstrip("@ \t"))
    return Attribute(
        kind=name.group(0) if name else None,
        offset=node.start_byte,
        length=node.end_byte - node.start_byte,
    )


def _member_text(node: Node, file: SourceFile) -> str:
    """Source of a member declaration with its attributes blanked out."""
    data = bytearray(file.data[node.start_byte : node.end_byte])
    for attr in _attribute_nodes(node):
        start = attr.start_byte - node.start_byte
        end = attr.end_byte - node.start_byte
        data[start:end] = b" " * (end - start)
    return bytes(data).decode("utf-8", errors="replace")


def _scan_attributes(text: str) -> list[tuple[str, int, int]]:
    """Find ``@name`` and ``@name(...)`` attributes in ``text``.

    Returns (name, start, end) character spans. Arguments are matched with
    balanced parentheses, skipping string literals.
    """
    found: list[tuple[str, int, int]] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == '"':
            index = _skip_string(text, index)
            continue
        if char == "@":
            name = _ATTRIBUTE_NAME.match(text, index + 1)
            if name is not None:
                end = name.end()
                if text.startswith("(", end):
                    end = _skip_arguments(text, end)
                found.append((name.group(0), index, end))
                index = end
                continue
        index += 1
    return found


def _skip_string(text: str, start: int) -> int:
    index = start + 1
    while index < len(text):
        if text[index] == "\\":
            index += 2
            continue
        if text[index] == '"':
            return index + 1
        index += 1
    return len(text)


def _skip_arguments(text: str, start: int) -> int:
    depth = 0
    index = start
    while index < len(text):
        char = text[index]
        if char == '"':
            index = _skip_string(text, index)
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return index + 1
        index += 1
    return len(text)


def _strip_leading_attributes(text: str) -> str:
    """Blank the attributes written before the member keyword, keeping those inside parameter types."""
    spans = [(start, end) for _, start, end in _scan_attributes(text)]
    keyword = _MEMBER_KEYWORD.search(_blank_spans(text, spans))
    limit = keyword.start() if keyword is not None else len(text)
    return _blank_spans(text, [(start, end) for start, end in spans if start < limit])


def _blank_spans(text: str, spans: list[tuple[int, int]]) -> str:
    chars = list(text)
    for start, end in spans:
        chars[start:end] = " " * (end - start)
    return "".join(chars)


def _inherited_types(rest: str) -> list[str]:
    rest = _WHERE_CLAUSE.split(rest, maxsplit=1)[0]
    if rest.lstrip().startswith("<"):
        _, rest = _read_balanced(rest.lstrip(), "<", ">")
    _, sep, clause = rest.partition(":")
    if not sep:
        return []
    return [t.strip() for t in _split_top_level(clause, ",") if t.strip()]


def _declaration_start(data: bytes, start: int) -> int:
    """Move ``start`` back over attribute lines that precede the declaration."""
    line_start = data.rfind(b"\n", 0, start) + 1
    leading = data[line_start:start]
    if leading.strip():
        if not leading.strip().startswith(b"@"):
            return start
        start = line_start + (len(leading) - len(leading.lstrip()))

    while line_start > 0:
        prev_end = line_start - 1
        prev_start = data.rfind(b"\n", 0, prev_end) + 1
        line = data[prev_start:prev_end]
        if not line.strip().startswith(b"@"):
            break
        start = prev_start + (len(line) - len(line.lstrip()))
        line_start = prev_start
    return start


def _doc_comment_span(data: bytes, start: int) -> tuple[int, int]:
    """Locate the comment block directly above the declaration starting at ``start``.

    Returns (-1, 0) when there is none.
    """
    line_start = data.rfind(b"\n", 0, start) + 1
    if line_start == 0 or data[line_start:start].strip():
        return -1, 0

    doc_start = -1
    cursor = line_start
    while cursor > 0:
        prev_end = cursor - 1
        prev_start = data.rfind(b"\n", 0, prev_end) + 1
        line = data[prev_start:prev_end]
        stripped = line.strip()
        if stripped.startswith(b"//"):
            doc_start = prev_start + (len(line) - len(line.lstrip()))
            cursor = prev_start
            continue
        if stripped.endswith(b"*/"):
            block_open = data.rfind(b"/*", 0, prev_end)
            if block_open < 0:
                break
            open_line_start = data.rfind(b"\n", 0, block_open) + 1
            if data[open_line_start:block_open].strip():
                break
            doc_start = block_open
            cursor = open_line_start
            continue
        break

    if doc_start < 0:
        return -1, 0
    doc_end = line_start - 1
    while doc_end > doc_start and data[doc_end - 1 : doc_end] in (b" ", b"\t", b"\r", b"\n"):
        doc_end -= 1
    return doc_start, doc_end - doc_start


def parse_member(text: str, owner: DeclarationKind = DeclarationKind.PROTOCOL) -> MemberNode | None:
    """Parse one member declaration, or None for members that are not mocked."""
    source = _strip_leading_attributes(text).strip().rstrip(";")
    head = _MEMBER_HEAD.match(source)
    if head is None:
        return None
    keyword = head.group("keyword")
    modifiers = set(re.findall(r"\w+", head.group("prefix")))
    rest = source[head.end() :]

    if owner is not DeclarationKind.PROTOCOL and (
        modifiers & {"private", "fileprivate", "final", "static", "class"} or keyword == "let"
    ):
        logger.debug("Skipping non-overridable member: %s", source.splitlines()[0])
        return None

    is_static = bool(modifiers & {"static", "class"})
    is_override = "override" in modifiers

    if keyword in ("var", "let"):
        return _parse_property(rest, keyword, is_static, is_override)
    if keyword == "func":
        return _parse_function(rest, is_static, is_override)
    if keyword == "init":
        return _parse_initializer(rest, is_override)

    if keyword in _UNSUPPORTED_REQUIREMENTS:
        logger.warning("Skipping %s requirement, the mock will not conform: %s", keyword, source.splitlines()[0])
    else:
        logger.debug("Skipping %s member", keyword)
    return None


def _parse_property(rest: str, keyword: str, is_static: bool, is_override: bool) -> MemberNode | None:
    match = re.match(r"\s*(`[^`]+`|\w+)\s*", rest)
    if match is None:
        return None
    name = match.group(1).strip("`")
    remainder = rest[match.end() :]

    type_name = UNKNOWN_TYPE
    if remainder.startswith(":"):
        type_name = _read_type(remainder[1:]) or UNKNOWN_TYPE

    accessor_block = remainder.partition("{")[2]
    if keyword == "let":
        is_settable = False
    elif accessor_block:
        is_settable = re.search(r"\b(set|willSet|didSet)\b", accessor_block) is not None
    else:
        is_settable = True

    return MemberNode(
        name=name,
        kind=MemberKind.PROPERTY,
        type_name=type_name,
        is_static=is_static,
        is_override=is_override,
        is_settable=is_settable,
    )


class _Signature(NamedTuple):
    generics: list[str]
    parameters: list[Parameter]
    where_clause: str
    is_async: bool
    throwing: str
    returns: str


def _parse_function(rest: str, is_static: bool, is_override: bool) -> MemberNode | None:
    match = re.match(r"\s*(`[^`]+`|[^\s(<]+)", rest)
    if match is None:
        return None
    if not _IDENTIFIER.match(match.group(1)):
        logger.warning("Skipping operator requirement %s, the mock will not conform", match.group(1))
        return None
    name = match.group(1).strip("`")
    signature = _parse_signature(rest[match.end() :])
    if signature is None:
        return None
    return MemberNode(
        name=name,
        kind=MemberKind.METHOD,
        type_name=signature.returns,
        parameters=signature.parameters,
        generic_parameters=signature.generics,
        where_clause=signature.where_clause,
        is_static=is_static,
        is_override=is_override,
        is_async=signature.is_async,
        throwing=signature.throwing,
    )


def _parse_initializer(rest: str, is_override: bool) -> MemberNode | None:
    is_failable = rest[:1] in ("?", "!")
    signature = _parse_signature(rest[1:] if is_failable else rest)
    if signature is None:
        return None
    return MemberNode(
        name="init",
        kind=MemberKind.INITIALIZER,
        parameters=signature.parameters,
        generic_parameters=signature.generics,
        where_clause=signature.where_clause,
        is_override=is_override,
        is_async=signature.is_async,
        throwing=signature.throwing,
        is_failable=is_failable,
    )


def _parse_signature(text: str) -> _Signature | None:
    rest = text.lstrip()
    generics: list[str] = []
    if rest.startswith("<"):
        clause, rest = _read_balanced(rest, "<", ">")
        generics = [" ".join(g.split()) for g in _split_top_level(clause, ",") if g.strip()]
        rest = rest.lstrip()
    if not rest.startswith("("):
        return None
    param_text, rest = _read_balanced(rest, "(", ")")
    parameters = [p for p in (_parse_parameter(raw) for raw in _split_top_level(param_text, ",")) if p]

    tail, *where = _WHERE_CLAUSE.split(_strip_body(rest), maxsplit=1)
    effects = _EFFECTS.match(tail)
    if effects is None:
        return None
    returns = _read_type(effects.group("returns") or "")
    if returns in ("", "()"):
        returns = "Void"
    return _Signature(
        generics=generics,
        parameters=parameters,
        where_clause=" ".join(where[0].split()) if where else "",
        is_async=bool(effects.group("async")),
        throwing=effects.group("throwing") or "",
        returns=returns,
    )


def _parse_parameter(raw: str) -> Parameter | None:
    head, sep, type_text = raw.partition(":")
    tokens = head.split()
    if not sep or not tokens or len(tokens) > 2:
        return None
    label = tokens[0].strip("`")
    name = tokens[-1].strip("`")
    return Parameter(label=label, name=name, type=_read_type(type_text) or UNKNOWN_TYPE)


def _strip_body(text: str) -> str:
    depth = 0
    for index, char in enumerate(text):
        if char in _OPENERS and char != "<":
            depth += 1
        elif char in _CLOSERS and char != ">":
            depth -= 1
        elif char == "{" and depth == 0:
            return text[:index]
    return text


def _read_type(text: str) -> str:
    """Read a type expression up to a top-level ``{`` or ``=``."""
    depth = 0
    index = 0
    while index < len(text):
        char = text[index]
        if char == "-" and text[index + 1 : index + 2] == ">":
            index += 2
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        elif depth <= 0 and char in "{=":
            break
        index += 1
    return " ".join(text[:index].split())


def _read_balanced(text: str, opener: str, closer: str) -> tuple[str, str]:
    """Split ``text`` (starting with ``opener``) into the enclosed part and the remainder."""
    depth = 0
    index = 0
    while index < len(text):
        char = text[index]
        if char == "-" and text[index + 1 : index + 2] == ">":
            index += 2
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
            if depth == 0 and char == closer:
                return text[1:index], text[index + 1 :]
        index += 1
    return text[1:], ""


def _split_top_level(text: str, separator: str) -> list[str]:
    parts: list[str] = []
    depth = 0
    current: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char == "-" and text[index + 1 : index + 2] == ">":
            current.append("->")
            index += 2
            continue
        if char in _OPENERS:
            depth += 1
        elif char in _CLOSERS:
            depth -= 1
        if char == separator and depth == 0:
            parts.append("".join(current))
            current = []
        else:
            current.append(char)
        index += 1
    if current:
        parts.append("".join(current))
    return parts
