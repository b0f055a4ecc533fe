from typing import Annotated

import typer
from rich.console import Console

from swift_mockgen.config import get_settings
from swift_mockgen.core.defaults import parse_default_value_overrides
from swift_mockgen.core.generate import run_generation
from swift_mockgen.parser import TreeSitterSwiftParser

console = Console()


def generate(
    sources: Annotated[list[str], typer.Argument(help="Swift files or directories to scan.")],
    output: Annotated[str, typer.Option("--output", "-o", help="Path of the generated mock file.")],
    annotation: Annotated[str | None, typer.Option(help="Doc-comment marker selecting declarations.")] = None,
    exclude: Annotated[
        list[str] | None, typer.Option("--exclude", "-e", help="Skip files whose name ends with this suffix.")
    ] = None,
    default_value: Annotated[
        list[str] | None, typer.Option("--default-value", help="Extra default as Type=expression.")
    ] = None,
    pound_if: Annotated[bool, typer.Option(help="Wrap the output in '#if MOCK'.")] = True,
) -> None:
    """Generate mocks for annotated declarations."""
    settings = get_settings()
    try:
        overrides = parse_default_value_overrides(default_value or [])
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="--default-value") from None

    updates: dict[str, object] = {"pound_if": pound_if, "default_value_overrides": overrides}
    if annotation is not None:
        updates["annotation"] = annotation
    if exclude:
        updates["exclusions"] = (*settings.exclusions, *exclude)
    settings = settings.model_copy(update=updates)

    try:
        result, _ = run_generation(TreeSitterSwiftParser(), sources, settings, output=output)
    except FileNotFoundError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise typer.Exit(code=1) from None

    console.print(f"[green]Scanned[/green] {result.files_scanned} file(s)")
    if result.files_skipped:
        console.print(f"[yellow]Skipped[/yellow] {result.files_skipped} unreadable file(s)")
    console.print(f"[green]Generated[/green] {len(result.mocks)} mock(s) in {result.output_path}")
