from collections.abc import Mapping
from types import MappingProxyType

from swift_mockgen.core.tables import ABSENT_VALUE, DEFAULT_VALUES, OBSERVABLE_EMPTY
from swift_mockgen.core.types import classify
from swift_mockgen.models import TypeShape


class DefaultValueSynthesizer:
    """Map a Swift type expression to a literal or constructor expression of that type.

    The primitive table is injected so platforms can extend it without
    touching the classification rules.
    """

    def __init__(self, table: Mapping[str, str] = DEFAULT_VALUES) -> None:
        empty = sorted(type_name for type_name, literal in table.items() if not literal.strip())
        if empty:
            raise ValueError(f"Empty default value for {', '.join(empty)}")
        self._table: Mapping[str, str] = MappingProxyType(dict(table))

    @property
    def table(self) -> Mapping[str, str]:
        return self._table

    def with_overrides(self, overrides: Mapping[str, str]) -> "DefaultValueSynthesizer":
        if not overrides:
            return self
        return DefaultValueSynthesizer({**self._table, **overrides})

    def classify(self, raw_type: str) -> TypeShape:
        return classify(raw_type, self._table)

    def default_value(self, raw_type: str) -> str | None:
        type_name = raw_type.strip()
        shape = classify(type_name, self._table)
        if shape is TypeShape.OPTIONAL:
            return ABSENT_VALUE
        if shape is TypeShape.REACTIVE_STREAM:
            return OBSERVABLE_EMPTY
        if shape is TypeShape.COLLECTION:
            return f"{type_name}()"
        if shape is TypeShape.PRIMITIVE:
            return self._table[type_name]
        return None


_default_synthesizer = DefaultValueSynthesizer()


def default_value(raw_type: str) -> str | None:
    return _default_synthesizer.default_value(raw_type)


def parse_default_value_overrides(pairs: list[str]) -> dict[str, str]:
    """Parse ``Type=expression`` pairs into a table of extra defaults."""
    overrides: dict[str, str] = {}
    for pair in pairs:
        type_name, sep, expression = pair.partition("=")
        if not sep or not type_name.strip() or not expression.strip():
            raise ValueError(f"Invalid default value override '{pair}'. Expected 'Type=expression'.")
        overrides[type_name.strip()] = expression.strip()
    return overrides
