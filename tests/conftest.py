"""Shared fixtures and helpers for tests."""

from pathlib import Path

import pytest

from swift_mockgen.config import GeneratorSettings
from swift_mockgen.models import Attribute, DeclarationKind, MemberKind, MemberNode, Parameter, Structure
from swift_mockgen.source import SourceFile

_REPO_ROOT = Path(__file__).parent.parent


# ---------------------------------------------------------------------------
# Auto-marker: tag tests as "unit" or "integration" based on directory
# ---------------------------------------------------------------------------


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    for item in items:
        test_path = Path(str(item.fspath))
        rel = test_path.relative_to(_REPO_ROOT / "tests")
        parts = rel.parts
        if parts and parts[0] == "integration":
            item.add_marker(pytest.mark.integration)
        else:
            item.add_marker(pytest.mark.unit)


# ---------------------------------------------------------------------------
# Shared unit-test fixtures
# ---------------------------------------------------------------------------

SESSION_SOURCE = """\
import Foundation
import RxSwift

/// Provides user sessions.
/// @CreateMock
@available(iOS 13.0, *)
public protocol SessionProviding: AnyObject {
    var token: String? { get set }
    var retryCount: Int { get }
    var events: Observable<Int> { get }
    var tags: [String] { get set }
    var delegate: SessionDelegate { get set }
    static var shared: Bool { get }
    init(config: Config)
    func refresh(force: Bool) throws -> Bool
    func fetch<T: Decodable>(_ id: String, as type: T.Type) async throws -> T
    func reset()
}

protocol NotMocked {
    func run()
}
"""


def make_session_structure(source: SourceFile) -> Structure:
    """Build the declaration node the parser produces for SESSION_SOURCE."""
    text = source.contents
    doc_start = text.index("/// Provides")
    doc_end = text.index("@available") - 1
    attribute = "@available(iOS 13.0, *)"
    return Structure(
        name="SessionProviding",
        kind=DeclarationKind.PROTOCOL,
        access_level="public",
        doc_offset=len(text[:doc_start].encode("utf-8")),
        doc_length=len(text[doc_start:doc_end].encode("utf-8")),
        attributes=[Attribute(kind="available", offset=text.index(attribute), length=len(attribute))],
        members=[
            MemberNode(name="token", kind=MemberKind.PROPERTY, type_name="String?"),
            MemberNode(name="retryCount", kind=MemberKind.PROPERTY, type_name="Int", is_settable=False),
            MemberNode(name="events", kind=MemberKind.PROPERTY, type_name="Observable<Int>", is_settable=False),
            MemberNode(name="tags", kind=MemberKind.PROPERTY, type_name="[String]"),
            MemberNode(name="delegate", kind=MemberKind.PROPERTY, type_name="SessionDelegate"),
            MemberNode(name="shared", kind=MemberKind.PROPERTY, type_name="Bool", is_static=True, is_settable=False),
            MemberNode(
                name="init",
                kind=MemberKind.INITIALIZER,
                parameters=[Parameter(label="config", name="config", type="Config")],
            ),
            MemberNode(
                name="refresh",
                kind=MemberKind.METHOD,
                type_name="Bool",
                parameters=[Parameter(label="force", name="force", type="Bool")],
                throwing="throws",
            ),
            MemberNode(
                name="fetch",
                kind=MemberKind.METHOD,
                type_name="T",
                parameters=[
                    Parameter(label="_", name="id", type="String"),
                    Parameter(label="as", name="type", type="T.Type"),
                ],
                generic_parameters=["T: Decodable"],
                is_async=True,
                throwing="throws",
            ),
            MemberNode(name="reset", kind=MemberKind.METHOD, type_name="Void"),
        ],
        inherited_types=["AnyObject"],
    )


@pytest.fixture
def session_source() -> SourceFile:
    return SourceFile(SESSION_SOURCE, path="SessionProviding.swift")


@pytest.fixture
def session_structure(session_source: SourceFile) -> Structure:
    return make_session_structure(session_source)


@pytest.fixture
def settings() -> GeneratorSettings:
    return GeneratorSettings()
