import logging
from collections.abc import Sequence
from pathlib import Path

from pydantic import BaseModel

from swift_mockgen.config import GeneratorSettings
from swift_mockgen.core.assembler import assemble
from swift_mockgen.core.defaults import DefaultValueSynthesizer
from swift_mockgen.core.paths import iter_swift_files
from swift_mockgen.core.ports.parser import DeclarationParser
from swift_mockgen.models import ProtocolMapEntry
from swift_mockgen.render.mock import render_file
from swift_mockgen.source import SourceFile

logger = logging.getLogger(__name__)


class GenerationResult(BaseModel):
    files_scanned: int
    files_skipped: int
    mocks: list[str]
    output_path: str | None = None


def collect_entries(
    parser: DeclarationParser,
    file: SourceFile,
    settings: GeneratorSettings,
    synthesizer: DefaultValueSynthesizer | None = None,
) -> list[ProtocolMapEntry]:
    entries: list[ProtocolMapEntry] = []
    for structure in parser.parse(file):
        entry = assemble(
            structure,
            file,
            settings.annotation,
            synthesizer=synthesizer,
            attribute_filter=settings.attribute_filter,
        )
        if entry is not None:
            entries.append(entry)
    return entries


def run_generation(
    parser: DeclarationParser,
    sources: Sequence[str | Path],
    settings: GeneratorSettings,
    output: str | Path | None = None,
) -> tuple[GenerationResult, str]:
    """Parse every Swift file under ``sources`` and render mocks for annotated declarations.

    Returns the summary and the rendered text. The text is written to ``output`` when given.
    """
    synthesizer = DefaultValueSynthesizer().with_overrides(settings.default_value_overrides)
    entries: list[ProtocolMapEntry] = []
    scanned = 0
    skipped = 0

    for path in iter_swift_files(sources, settings.exclusions):
        try:
            file = SourceFile.from_path(path)
        except (OSError, UnicodeDecodeError) as exc:
            logger.warning("Skipping %s: %s", path, exc)
            skipped += 1
            continue
        scanned += 1
        found = collect_entries(parser, file, settings, synthesizer)
        if found:
            logger.info("Found %d annotated declaration(s) in %s", len(found), path)
        entries.extend(found)

    rendered = render_file(entries, settings)
    output_path: str | None = None
    if output is not None:
        target = Path(output)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(rendered, encoding="utf-8")
        output_path = str(target)
        logger.info("Wrote %d mock(s) to %s", len(entries), target)

    result = GenerationResult(
        files_scanned=scanned,
        files_skipped=skipped,
        mocks=[entry.structure.name for entry in entries],
        output_path=output_path,
    )
    return result, rendered
