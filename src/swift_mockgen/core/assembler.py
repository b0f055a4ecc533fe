import logging
from collections import Counter

from swift_mockgen.core.annotations import extract_attributes, is_annotated
from swift_mockgen.core.defaults import DefaultValueSynthesizer
from swift_mockgen.core.tables import (
    ARG_VALUES_SUFFIX,
    CALL_COUNT_SUFFIX,
    HANDLER_SUFFIX,
    SET_CALL_COUNT_SUFFIX,
    UNDERLYING_PREFIX,
)
from swift_mockgen.core.types import display_name, wrapped_shape
from swift_mockgen.models import MemberKind, MemberModel, MemberNode, ProtocolMapEntry, Structure
from swift_mockgen.source import SourceFile

logger = logging.getLogger(__name__)

_default_synthesizer = DefaultValueSynthesizer()


def build_member_model(
    member: MemberNode,
    synthesizer: DefaultValueSynthesizer | None = None,
    identifier: str | None = None,
) -> MemberModel:
    synth = synthesizer or _default_synthesizer
    raw_type = member.type_name.strip()
    is_initializer = member.kind is MemberKind.INITIALIZER
    if is_initializer:
        raw_type = ""

    return MemberModel(
        name=member.name,
        identifier=identifier or member.name,
        kind=member.kind,
        raw_type=raw_type,
        type_shape=synth.classify(raw_type),
        wrapped_shape=wrapped_shape(raw_type, synth.table),
        default_value=synth.default_value(raw_type),
        is_static=member.is_static,
        is_override=member.is_override,
        is_initializer=is_initializer,
        parameters=member.parameters,
        generic_parameters=member.generic_parameters,
        where_clause=member.where_clause,
        is_async=member.is_async,
        throwing=member.throwing,
        is_failable=member.is_failable,
    )


def _signature_suffix(member: MemberNode) -> str:
    parts = []
    for param in member.parameters:
        parts.append(display_name(param.label))
        parts.append(display_name(param.type))
    return "".join(parts)


def _generated_names(member: MemberNode, identifier: str) -> set[str]:
    """Names the renderer derives from ``identifier`` for ``member``."""
    if member.kind is MemberKind.PROPERTY:
        return {identifier + SET_CALL_COUNT_SUFFIX, UNDERLYING_PREFIX + display_name(identifier)}
    if member.kind is MemberKind.METHOD:
        return {identifier + suffix for suffix in (CALL_COUNT_SUFFIX, ARG_VALUES_SUFFIX, HANDLER_SUFFIX)}
    return set()


def _member_identifiers(members: list[MemberNode]) -> list[str]:
    """Unique identifiers for members; overloads get a signature-based suffix.

    An identifier is also bumped when a name generated from it would clash
    with a declared member or with a name generated for an earlier member.
    """
    counts = Counter(m.name for m in members if m.kind is MemberKind.METHOD)
    declared = {m.name for m in members}
    identifiers: list[str] = []
    taken: set[str] = set()
    for member in members:
        identifier = member.name
        if member.kind is MemberKind.METHOD and counts[member.name] > 1:
            identifier = member.name + _signature_suffix(member)
        elif member.kind is MemberKind.INITIALIZER:
            identifier = "init" + _signature_suffix(member)

        base = identifier
        index = 1
        generated = _generated_names(member, identifier)
        while identifier in taken or generated & (taken | declared):
            index += 1
            identifier = f"{base}{index}"
            generated = _generated_names(member, identifier)
        taken.add(identifier)
        taken.update(generated)
        identifiers.append(identifier)
    return identifiers


def assemble(
    node: Structure,
    file: SourceFile,
    filter_annotation: str,
    synthesizer: DefaultValueSynthesizer | None = None,
    attribute_filter: str | None = None,
) -> ProtocolMapEntry | None:
    """Build the mock work unit for ``node``, or None if it is not annotated."""
    if not is_annotated(node, filter_annotation, file):
        return None

    attributes = extract_attributes(node, file, filter_on=attribute_filter)
    identifiers = _member_identifiers(node.members)
    models = tuple(
        build_member_model(member, synthesizer, identifier)
        for member, identifier in zip(node.members, identifiers, strict=True)
    )
    logger.debug("Assembled %s with %d member(s)", node.name, len(models))
    return ProtocolMapEntry(
        structure=node,
        file=file,
        models=models,
        attributes=tuple(attributes),
    )
