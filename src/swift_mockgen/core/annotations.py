"""Doc-comment and attribute extraction for parsed declarations.

Extraction is best effort: absent or malformed offsets never raise and are
treated as "no doc comment" / "no attribute text".
"""

from swift_mockgen.models import Attribute, Structure
from swift_mockgen.source import SourceFile


def extract(source: Attribute, content: SourceFile) -> str:
    if source.offset is None or source.length is None:
        return ""
    return content.extract(source.offset, source.length)


def extract_doc_comment(node: Structure, content: SourceFile) -> str:
    offset = node.doc_offset if node.doc_offset is not None else -1
    length = node.doc_length if node.doc_length is not None else 0
    return content.extract(offset, length)


def is_annotated(node: Structure, marker: str, content: SourceFile) -> bool:
    if not marker:
        return False
    doc = extract_doc_comment(node, content)
    return bool(doc) and marker in doc


def extract_attributes(node: Structure, content: SourceFile, filter_on: str | None = None) -> list[str]:
    """Return the source text of each attribute of ``node``.

    Attributes without a kind are skipped. When ``filter_on`` is given only
    attributes of that kind are returned.
    """
    results: list[str] = []
    for attribute in node.attributes:
        if attribute.kind is None:
            continue
        if filter_on is not None and attribute.kind != filter_on:
            continue
        results.append(extract(attribute, content))
    return results
