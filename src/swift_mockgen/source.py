import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class SourceFile:
    """Text buffer of one Swift file, addressed by UTF-8 byte offsets."""

    def __init__(self, contents: str, path: str | None = None) -> None:
        self.path = path
        self.contents = contents
        self.data = contents.encode("utf-8")
        self.lines = contents.splitlines()

    @classmethod
    def from_path(cls, path: str | Path) -> "SourceFile":
        file_path = Path(path)
        try:
            contents = file_path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise FileNotFoundError(f"File not found: {path}") from None
        return cls(contents, path=str(file_path))

    def extract(self, offset: int, length: int) -> str:
        """Return the text in the byte range [offset, offset + length).

        A negative offset or a non-positive length yields "". Ranges that run
        past the end of the buffer are clamped.
        """
        if offset < 0 or length <= 0:
            return ""
        end = offset + length
        if end > len(self.data):
            logger.warning(
                "Byte range %d+%d exceeds %s (%d bytes); clamping",
                offset,
                length,
                self.path or "<memory>",
                len(self.data),
            )
            end = len(self.data)
        if offset >= end:
            return ""
        return self.data[offset:end].decode("utf-8", errors="replace")

    def lines_starting(self, keyword: str) -> list[str]:
        return [line for line in self.lines if line.strip(" \t").startswith(keyword)]

    def __repr__(self) -> str:
        return f"SourceFile(path={self.path!r}, bytes={len(self.data)})"
