from collections.abc import Iterable, Iterator, Sequence
from pathlib import Path

SWIFT_SUFFIX = ".swift"


def should_parse(path: str | Path, exclusions: Sequence[str] | None = None) -> bool:
    """True for Swift files whose stem does not end with an excluded suffix."""
    file_path = Path(path)
    if file_path.suffix != SWIFT_SUFFIX:
        return False
    stem = file_path.name[: -len(SWIFT_SUFFIX)]
    return not any(stem.endswith(suffix) for suffix in exclusions or ())


def iter_swift_files(roots: Iterable[str | Path], exclusions: Sequence[str] | None = None) -> Iterator[Path]:
    seen: set[Path] = set()
    for root in roots:
        root_path = Path(root)
        if root_path.is_dir():
            candidates = sorted(p for p in root_path.rglob(f"*{SWIFT_SUFFIX}") if p.is_file())
        elif root_path.exists():
            candidates = [root_path]
        else:
            raise FileNotFoundError(f"Path not found: {root}")

        for candidate in candidates:
            resolved = candidate.resolve()
            if resolved in seen or not should_parse(candidate, exclusions):
                continue
            seen.add(resolved)
            yield candidate
