import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from swift_mockgen.cli.generate import generate
from swift_mockgen.cli.inspect import classify, inspect

app = typer.Typer(
    name="swift-mockgen",
    help="Swift mock generator: synthesize test mocks for annotated protocols.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)


@app.callback()
def _configure(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Enable debug logging.")] = False,
) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
        force=True,
    )


app.command("generate")(generate)
app.command("inspect")(inspect)
app.command("classify")(classify)


def main() -> None:
    app()
