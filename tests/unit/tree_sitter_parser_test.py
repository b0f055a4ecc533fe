"""Unit tests for the tree-sitter Swift declaration parser."""

import pytest

from swift_mockgen.config import GeneratorSettings
from swift_mockgen.core.annotations import extract_attributes
from swift_mockgen.core.assembler import assemble
from swift_mockgen.models import DeclarationKind, MemberKind, Structure
from swift_mockgen.parser import TreeSitterSwiftParser
from swift_mockgen.render.mock import render_entry
from swift_mockgen.source import SourceFile


@pytest.fixture(scope="module")
def parser() -> TreeSitterSwiftParser:
    return TreeSitterSwiftParser()


def _by_name(structures):
    return {structure.name: structure for structure in structures}


def test_finds_every_protocol(parser: TreeSitterSwiftParser, session_source: SourceFile) -> None:
    structures = _by_name(parser.parse(session_source))
    assert set(structures) == {"SessionProviding", "NotMocked"}
    assert structures["NotMocked"].kind is DeclarationKind.PROTOCOL


def test_declaration_header(
    parser: TreeSitterSwiftParser, session_source: SourceFile, session_structure: Structure
) -> None:
    parsed = _by_name(parser.parse(session_source))["SessionProviding"]
    expected = session_structure

    assert parsed.kind is DeclarationKind.PROTOCOL
    assert parsed.access_level == "public"
    assert parsed.inherited_types == ["AnyObject"]
    assert parsed.attributes == expected.attributes
    assert (parsed.doc_offset, parsed.doc_length) == (expected.doc_offset, expected.doc_length)


def test_members(parser: TreeSitterSwiftParser, session_source: SourceFile, session_structure: Structure) -> None:
    parsed = _by_name(parser.parse(session_source))["SessionProviding"]
    expected = session_structure

    assert [(m.name, m.kind) for m in parsed.members] == [(m.name, m.kind) for m in expected.members]
    properties = {m.name: m for m in parsed.members if m.kind is MemberKind.PROPERTY}
    assert properties["token"].type_name == "String?"
    assert properties["events"].type_name == "Observable<Int>"
    assert properties["retryCount"].is_settable is False
    assert properties["shared"].is_static is True
    fetch = next(m for m in parsed.members if m.name == "fetch")
    assert fetch.generic_parameters == ["T: Decodable"]
    assert fetch.is_async is True


def test_only_annotated_declarations_assemble(parser: TreeSitterSwiftParser, session_source: SourceFile) -> None:
    structures = _by_name(parser.parse(session_source))
    assert assemble(structures["SessionProviding"], session_source, "@CreateMock") is not None
    assert assemble(structures["NotMocked"], session_source, "@CreateMock") is None


def test_undocumented_declaration_has_no_doc_span(parser: TreeSitterSwiftParser) -> None:
    file = SourceFile("import Foundation\n\nprotocol Plain {\n    func run()\n}\n")
    (structure,) = parser.parse(file)
    assert (structure.doc_offset, structure.doc_length) == (-1, 0)


def test_block_doc_comment(parser: TreeSitterSwiftParser) -> None:
    file = SourceFile("/**\n @CreateMock\n */\nprotocol Loader {\n    func load()\n}\n")
    (structure,) = parser.parse(file)
    assert structure.doc_offset == 0
    assert assemble(structure, file, "@CreateMock") is not None


def test_class_declaration(parser: TreeSitterSwiftParser) -> None:
    file = SourceFile(
        "/// @CreateMock\n"
        "open class Service: Base {\n"
        "    var count: Int = 0\n"
        "    private var secret = 1\n"
        "    let id = 1\n"
        "    func run() -> Bool {\n"
        "        return true\n"
        "    }\n"
        "}\n"
    )
    (structure,) = parser.parse(file)
    assert structure.name == "Service"
    assert structure.kind is DeclarationKind.CLASS
    assert structure.access_level == "open"
    assert [m.name for m in structure.members] == ["count", "run"]
    assert structure.members[1].type_name == "Bool"


def test_struct_declaration(parser: TreeSitterSwiftParser) -> None:
    file = SourceFile("struct Point {\n    var x: Int\n}\n")
    (structure,) = parser.parse(file)
    assert structure.kind is DeclarationKind.STRUCT


def test_enums_are_ignored(parser: TreeSitterSwiftParser) -> None:
    file = SourceFile("/// @CreateMock\nenum Direction {\n    case up, down\n}\n")
    assert parser.parse(file) == []


@pytest.mark.parametrize(
    "source",
    [
        "/// @CreateMock\n"
        '@available(*, deprecated, message: "use (x) instead")\n'
        "protocol P {\n"
        '    @available(iOS, deprecated: 13, message: "old (y)")\n'
        "    func load() -> Int\n"
        "    var name: String { get }\n"
        "}\n",
        "/// @CreateMock\n"
        '@available(*, deprecated, message: "use (x) instead") protocol P { '
        '@available(iOS, deprecated: 13, message: "old (y)") func load() -> Int; var name: String { get } }\n',
    ],
    ids=["multi-line", "single-line"],
)
def test_attribute_arguments_with_parentheses(parser: TreeSitterSwiftParser, source: str) -> None:
    file = SourceFile(source)
    (structure,) = parser.parse(file)

    assert [m.name for m in structure.members] == ["load", "name"]
    assert structure.members[0].type_name == "Int"
    assert extract_attributes(structure, file) == ['@available(*, deprecated, message: "use (x) instead")']

    entry = assemble(structure, file, "@CreateMock")
    assert entry is not None
    rendered = render_entry(entry, GeneratorSettings())
    assert rendered is not None
    assert rendered.splitlines()[:2] == [
        '@available(*, deprecated, message: "use (x) instead")',
        "class PMock: P {",
    ]
