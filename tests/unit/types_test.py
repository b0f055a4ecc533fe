"""Unit tests for type classification and display names."""

import re

import pytest

from swift_mockgen.core.tables import DEFAULT_VALUES
from swift_mockgen.core.types import (
    capitalize_first_letter,
    classify,
    display_name,
    unwrap_optional,
    wrapped_shape,
)
from swift_mockgen.models import TypeShape


class TestClassify:
    @pytest.mark.parametrize(
        "raw_type",
        ["Int?", "[String]?", "Observable<Int>?", "SessionDelegate?", "(() -> Void)?", "Int!"],
    )
    def test_optional_marker_wins(self, raw_type: str) -> None:
        assert classify(raw_type) is TypeShape.OPTIONAL

    @pytest.mark.parametrize("raw_type", ["Observable<Int>", "RxSwift.Observable<[String]>"])
    def test_reactive_stream(self, raw_type: str) -> None:
        assert classify(raw_type) is TypeShape.REACTIVE_STREAM

    @pytest.mark.parametrize(
        "raw_type",
        [
            "[Int]",
            "[String: Int]",
            "Array<Int>",
            "Set<String>",
            "Dictionary<String, Int>",
            "Swift.Array<Int>",
            "Array",
            "Set",
            "Dictionary",
        ],
    )
    def test_collection(self, raw_type: str) -> None:
        assert classify(raw_type) is TypeShape.COLLECTION

    @pytest.mark.parametrize("raw_type", sorted(DEFAULT_VALUES))
    def test_primitive_table_entries(self, raw_type: str) -> None:
        assert classify(raw_type) is TypeShape.PRIMITIVE

    @pytest.mark.parametrize("raw_type", ["SessionDelegate", "Settings", "Arrayish", "Set.Index", "T", "", "   "])
    def test_unknown(self, raw_type: str) -> None:
        assert classify(raw_type) is TypeShape.UNKNOWN

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert classify("  Int  ") is TypeShape.PRIMITIVE

    def test_custom_table(self) -> None:
        assert classify("Widget", {"Widget": "Widget()"}) is TypeShape.PRIMITIVE
        assert classify("Int", {"Widget": "Widget()"}) is TypeShape.UNKNOWN


class TestUnwrapOptional:
    def test_strips_one_marker(self) -> None:
        assert unwrap_optional("[Int]?") == "[Int]"

    def test_strips_closure_parentheses(self) -> None:
        assert unwrap_optional("((Int) -> Void)?") == "(Int) -> Void"

    def test_keeps_tuple_parentheses_that_do_not_wrap(self) -> None:
        assert unwrap_optional("(Int) -> (String)?") == "(Int) -> (String)"

    def test_non_optional_unchanged(self) -> None:
        assert unwrap_optional(" Int ") == "Int"


class TestWrappedShape:
    def test_optional_collection(self) -> None:
        assert wrapped_shape("[Int]?") is TypeShape.COLLECTION

    def test_optional_stream(self) -> None:
        assert wrapped_shape("Observable<Int>?") is TypeShape.REACTIVE_STREAM

    def test_optional_primitive(self) -> None:
        assert wrapped_shape("Int?") is TypeShape.PRIMITIVE

    def test_nested_optional_is_unknown(self) -> None:
        assert wrapped_shape("Int??") is TypeShape.UNKNOWN

    def test_not_optional(self) -> None:
        assert wrapped_shape("Int") is None


class TestDisplayName:
    @pytest.mark.parametrize(
        ("raw_type", "expected"),
        [
            ("Int", "Int"),
            ("[String: Observable<Int>]?", "StringObservableInt"),
            ("RxSwift.Observable<foo_bar>", "RxSwiftObservableFooBar"),
            ("(Int, String) -> Void", "IntStringVoid"),
            ("Array<Unknown>", "Array"),
            ("Unknown", ""),
            ("unknown", ""),
            ("", ""),
            ("?[]<>", ""),
        ],
    )
    def test_display_name(self, raw_type: str, expected: str) -> None:
        assert display_name(raw_type) == expected

    @pytest.mark.parametrize(
        "raw_type",
        ["[String: Observable<Int>]?", "Set<my.Type>", "Result<Unknown, Error>", "snake_case_name", "Int"],
    )
    def test_idempotent(self, raw_type: str) -> None:
        once = display_name(raw_type)
        assert display_name(once) == once

    @pytest.mark.parametrize("raw_type", ["Dictionary<String, [Int?]>", "(inout Int) throws -> Bool", "a.b.c"])
    def test_output_is_identifier_safe(self, raw_type: str) -> None:
        assert re.fullmatch(r"[0-9A-Za-z]*", display_name(raw_type))


def test_capitalize_first_letter_keeps_rest() -> None:
    assert capitalize_first_letter("fooBar") == "FooBar"
    assert capitalize_first_letter("") == ""
