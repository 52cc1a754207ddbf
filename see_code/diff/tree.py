from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List


class LineKind(str, Enum):
    CONTEXT = "context"
    ADDED = "added"
    REMOVED = "removed"

    @property
    def marker(self) -> str:
        return _MARKERS[self]

    @classmethod
    def from_marker(cls, marker: str) -> "LineKind":
        """'+' -> ADDED, '-' -> REMOVED, tout le reste -> CONTEXT."""
        if marker == "+":
            return cls.ADDED
        if marker == "-":
            return cls.REMOVED
        return cls.CONTEXT


_MARKERS = {LineKind.CONTEXT: " ", LineKind.ADDED: "+", LineKind.REMOVED: "-"}


@dataclass
class DiffLine:
    content: str  # texte sans le marqueur
    kind: LineKind

    @property
    def raw(self) -> str:
        """Ligne d'origine, marqueur compris."""
        return self.kind.marker + self.content


@dataclass
class DiffHunk:
    header: str  # ligne "@@ ... @@" telle quelle, plages non décodées
    lines: List[DiffLine] = field(default_factory=list)
    collapsed: bool = False


@dataclass
class DiffFile:
    path: str
    hunks: List[DiffHunk] = field(default_factory=list)
    collapsed: bool = False


@dataclass
class DiffTree:
    """Fichier -> Hunk -> Ligne, dans l'ordre du diff."""
    files: List[DiffFile] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.files)

    def __iter__(self) -> Iterator[DiffFile]:
        return iter(self.files)

    @property
    def hunk_count(self) -> int:
        return sum(len(f.hunks) for f in self.files)

    @property
    def line_count(self) -> int:
        return sum(len(h.lines) for f in self.files for h in f.hunks)
