"""Render assembled entries as Swift mock classes."""

import logging
import re
from collections.abc import Callable, Iterable

from swift_mockgen.config import GeneratorSettings
from swift_mockgen.core.tables import (
    ARG_VALUES_SUFFIX,
    CALL_COUNT_SUFFIX,
    HANDLER_SUFFIX,
    SET_CALL_COUNT_SUFFIX,
    UNDERLYING_PREFIX,
    UNKNOWN_TYPE,
)
from swift_mockgen.core.types import display_name
from swift_mockgen.models import DeclarationKind, MemberKind, MemberModel, Parameter, ProtocolMapEntry

logger = logging.getLogger(__name__)

INDENT = "    "
POUND_IF_MOCK = "#if MOCK"
POUND_ENDIF = "#endif"
IMPORT_KEYWORD = "import "

_PARAMETER_QUALIFIERS = re.compile(r"^(?:(?:inout|__owned|__shared|borrowing|consuming)\s+|@\w+\s+)*")
_PUBLIC_LEVELS = {"public", "open"}


def mock_name(entry: ProtocolMapEntry, settings: GeneratorSettings) -> str:
    return f"{entry.structure.name}{settings.mock_suffix}"


def collect_imports(entries: Iterable[ProtocolMapEntry]) -> list[str]:
    imports: set[str] = set()
    for entry in entries:
        imports.update(line.strip() for line in entry.file.lines_starting(IMPORT_KEYWORD))
    return sorted(imports)


def render_file(entries: list[ProtocolMapEntry], settings: GeneratorSettings) -> str:
    sections = [settings.header]
    if settings.pound_if:
        sections.append(POUND_IF_MOCK)
    imports = collect_imports(entries)
    if imports:
        sections.append("\n".join(imports))
    for entry in entries:
        rendered = render_entry(entry, settings)
        if rendered is not None:
            sections.append(rendered)
    if settings.pound_if:
        sections.append(POUND_ENDIF)
    return "\n\n".join(section.strip("\n") for section in sections) + "\n"


def render_entry(entry: ProtocolMapEntry, settings: GeneratorSettings) -> str | None:
    structure = entry.structure
    if structure.kind is DeclarationKind.STRUCT:
        logger.warning("Skipping %s: structs cannot be subclassed into a mock", structure.name)
        return None

    is_class = structure.kind is DeclarationKind.CLASS
    access = "public " if structure.access_level in _PUBLIC_LEVELS else ""

    blocks: list[list[str]] = []
    if not is_class and not any(m.is_initializer and not m.parameters for m in entry.models):
        blocks.append([f"{access}init() {{}}"])

    for model in entry.models:
        override = "override " if is_class or model.is_override else ""
        if model.kind is MemberKind.PROPERTY:
            if model.raw_type == UNKNOWN_TYPE:
                logger.warning("Skipping %s.%s: declared type is unknown", structure.name, model.name)
                continue
            blocks.append(_render_property(model, access, override))
        elif model.kind is MemberKind.METHOD:
            blocks.append(_render_method(model, access, override))
        elif not is_class:
            blocks.append(_render_initializer(model, access))

    lines = list(entry.attributes)
    lines.append(f"{access}class {mock_name(entry, settings)}: {structure.name} {{")
    for index, block in enumerate(blocks):
        if index:
            lines.append("")
        lines.extend(f"{INDENT}{line}" if line else "" for line in block)
    lines.append("}")
    return "\n".join(lines)


def _render_property(model: MemberModel, access: str, override: str) -> list[str]:
    static = "static " if model.is_static else ""
    storage = UNDERLYING_PREFIX + display_name(model.identifier)
    counter = model.identifier + SET_CALL_COUNT_SUFFIX

    lines = [f"{access}{static}var {counter} = 0"]
    if model.default_value is not None:
        lines.append(f"{access}{static}var {storage}: {model.raw_type} = {model.default_value}")
        getter = [f"return {storage}"]
    else:
        lines.append(f"{access}{static}var {storage}: {_optional(model.raw_type)} = nil")
        getter = [
            f'guard let value = {storage} else {{ fatalError("{storage} must be set before {model.name} is read") }}',
            "return value",
        ]

    lines.append(f"{access}{override}{static}var {model.name}: {model.raw_type} {{")
    lines.append(f"{INDENT}get {{")
    lines.extend(f"{INDENT * 2}{line}" for line in getter)
    lines.append(f"{INDENT}}}")
    lines.append(f"{INDENT}set {{")
    lines.append(f"{INDENT * 2}{storage} = newValue")
    lines.append(f"{INDENT * 2}{counter} += 1")
    lines.append(f"{INDENT}}}")
    lines.append("}")
    return lines


def _render_method(model: MemberModel, access: str, override: str) -> list[str]:
    static = "static " if model.is_static else ""
    generic_names = [g.split(":", 1)[0].strip() for g in model.generic_parameters]
    erase = _generic_eraser(generic_names)
    returns_void = model.raw_type == "Void"
    handler = model.identifier + HANDLER_SUFFIX
    call_count = model.identifier + CALL_COUNT_SUFFIX
    arg_values = model.identifier + ARG_VALUES_SUFFIX

    handler_params = ", ".join(erase(_variadic_as_array(p.type)) for p in model.parameters)
    handler_effects = ("async " if model.is_async else "") + ("throws " if model.throwing == "throws" else "")
    handler_return = "Void" if returns_void else erase(model.raw_type)

    lines = [f"{access}{static}var {call_count} = 0"]
    recorded = [p for p in model.parameters if _is_recordable(p)]
    if recorded:
        lines.append(f"{access}{static}var {arg_values} = [{_arg_value_type(recorded, erase)}]()")
    lines.append(f"{access}{static}var {handler}: (({handler_params}) {handler_effects}-> {handler_return})?")

    signature = f"{access}{override}{static}func {model.name}{_generic_clause(model)}({_parameter_list(model)})"
    signature += _effects(model)
    if not returns_void:
        signature += f" -> {model.raw_type}"
    if model.where_clause:
        signature += f" where {model.where_clause}"
    lines.append(f"{signature} {{")

    lines.append(f"{INDENT}{call_count} += 1")
    if recorded:
        lines.append(f"{INDENT}{arg_values}.append({_arg_value(recorded)})")

    call = _call_prefix(model) + f"{handler}({', '.join(_argument(p) for p in model.parameters)})"
    lines.append(f"{INDENT}if let {handler} = {handler} {{")
    if returns_void:
        lines.append(f"{INDENT * 2}{call}")
    else:
        cast = f" as! {model.raw_type}" if erase(model.raw_type) != model.raw_type else ""
        lines.append(f"{INDENT * 2}return {call}{cast}")
    lines.append(f"{INDENT}}}")

    if not returns_void:
        if model.default_value is not None:
            lines.append(f"{INDENT}return {model.default_value}")
        else:
            lines.append(f"{INDENT}fatalError(\"{handler} returns can't have a default value thus its handler must be set\")")
    lines.append("}")
    return lines


def _render_initializer(model: MemberModel, access: str) -> list[str]:
    failable = "?" if model.is_failable else ""
    signature = f"{access}required init{failable}{_generic_clause(model)}({_parameter_list(model)}){_effects(model)}"
    if model.where_clause:
        signature += f" where {model.where_clause}"
    return [f"{signature} {{", "}"]


def _generic_clause(model: MemberModel) -> str:
    if not model.generic_parameters:
        return ""
    return "<" + ", ".join(model.generic_parameters) + ">"


def _effects(model: MemberModel) -> str:
    effects = " async" if model.is_async else ""
    if model.throwing:
        effects += f" {model.throwing}"
    return effects


def _call_prefix(model: MemberModel) -> str:
    prefix = "try " if model.throwing == "throws" else ""
    if model.is_async:
        prefix += "await "
    return prefix


def _parameter_list(model: MemberModel) -> str:
    return ", ".join(_format_parameter(p) for p in model.parameters)


def _format_parameter(param: Parameter) -> str:
    if param.label == param.name:
        return f"{param.name}: {param.type}"
    return f"{param.label} {param.name}: {param.type}"


def _argument(param: Parameter) -> str:
    if param.type.startswith("inout "):
        return f"&{param.name}"
    return param.name


def _is_recordable(param: Parameter) -> bool:
    # Non-escaping closures cannot be stored.
    return "->" not in param.type or "@escaping" in param.type


def _value_type(param: Parameter) -> str:
    return _variadic_as_array(_PARAMETER_QUALIFIERS.sub("", param.type))


def _variadic_as_array(type_name: str) -> str:
    if type_name.endswith("..."):
        return f"[{type_name[:-3]}]"
    return type_name


def _arg_value_type(params: list[Parameter], erase: Callable[[str], str]) -> str:
    if len(params) == 1:
        return erase(_value_type(params[0]))
    return "(" + ", ".join(f"{p.name}: {erase(_value_type(p))}" for p in params) + ")"


def _arg_value(params: list[Parameter]) -> str:
    if len(params) == 1:
        return params[0].name
    return "(" + ", ".join(f"{p.name}: {p.name}" for p in params) + ")"


def _optional(type_name: str) -> str:
    if "->" in type_name or "&" in type_name or type_name.startswith(("any ", "some ")):
        return f"({type_name})?"
    return f"{type_name}?"


def _generic_eraser(names: list[str]) -> Callable[[str], str]:
    if not names:
        return lambda type_name: type_name
    pattern = re.compile(r"\b(?:" + "|".join(re.escape(n) for n in names) + r")\b")
    return lambda type_name: pattern.sub("Any", type_name)
