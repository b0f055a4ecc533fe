from typing import Protocol

from swift_mockgen.models import Structure
from swift_mockgen.source import SourceFile


class DeclarationParser(Protocol):
    def parse(self, file: SourceFile) -> list[Structure]: ...
