from collections.abc import Sequence
from typing import Annotated, Any

import typer
from rich.console import Console
from rich.table import Table

from swift_mockgen.config import get_settings
from swift_mockgen.core.assembler import assemble
from swift_mockgen.core.defaults import DefaultValueSynthesizer
from swift_mockgen.core.types import display_name
from swift_mockgen.parser import TreeSitterSwiftParser
from swift_mockgen.source import SourceFile

console = Console()


def _render_table(headers: Sequence[str], rows: Sequence[tuple[Any, ...]], title: str | None = None) -> None:
    table = Table(title=title, show_lines=False)
    for h in headers:
        table.add_column(h)
    for row in rows:
        table.add_row(*(str(v) for v in row))
    console.print(table)
    console.print(f"({len(rows)} rows)")


def inspect(
    path: Annotated[str, typer.Argument(help="Swift file to inspect.")],
    annotation: Annotated[str | None, typer.Option(help="Doc-comment marker selecting declarations.")] = None,
) -> None:
    """Show the member models of each annotated declaration in a file."""
    settings = get_settings()
    try:
        file = SourceFile.from_path(path)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from None

    marker = annotation or settings.annotation
    found = 0
    for structure in TreeSitterSwiftParser().parse(file):
        entry = assemble(structure, file, marker, attribute_filter=settings.attribute_filter)
        if entry is None:
            continue
        found += 1
        rows = [
            (m.identifier, m.kind, m.raw_type, m.type_shape, m.default_value or "-", m.is_static)
            for m in entry.models
        ]
        _render_table(
            ["identifier", "kind", "type", "shape", "default", "static"],
            rows,
            title=f"{structure.kind} {structure.name}",
        )
    if not found:
        console.print(f"No declarations annotated with {marker} in {path}")


def classify(
    types: Annotated[list[str], typer.Argument(help="Swift type expressions.")],
) -> None:
    """Classify type expressions and show their synthesized defaults."""
    synthesizer = DefaultValueSynthesizer()
    rows = [
        (t, synthesizer.classify(t), synthesizer.default_value(t) or "-", display_name(t) or "-")
        for t in types
    ]
    _render_table(["type", "shape", "default", "display name"], rows)
