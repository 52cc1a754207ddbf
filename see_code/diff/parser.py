from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .errors import AllocationFailure, EmptyInputError
from .tokens import scan_tokens, strip_side_prefix
from .tree import DiffFile, DiffHunk, DiffLine, DiffTree, LineKind

__all__ = ["LineTag", "LineClass", "classify_line", "parse_diff", "split_lines"]

FILE_PREFIX = "diff --git "
HUNK_PREFIX = "@@"
CONTENT_MARKERS = (" ", "+", "-")


class LineTag(str, Enum):
    FILE = "file"
    HUNK = "hunk"
    CONTENT = "content"
    OTHER = "other"


@dataclass(frozen=True)
class LineClass:
    tag: LineTag
    text: str = ""  # chemin (FILE), en-tête (HUNK), contenu sans marqueur (CONTENT)
    kind: Optional[LineKind] = None


def _file_path(rest: str) -> str:
    tokens = scan_tokens(rest)
    a_path = strip_side_prefix(tokens[0], "a") if tokens else ""
    b_path = strip_side_prefix(tokens[1], "b") if len(tokens) > 1 else ""
    return b_path or a_path


def classify_line(line: str) -> LineClass:
    """
    Classe une ligne sans tenir compte du contexte, par ordre de priorité:
    en-tête de fichier, en-tête de hunk, ligne de contenu, autre.
    C'est le parseur qui décide ensuite si le contexte permet de la garder.
    """
    if line.startswith(FILE_PREFIX):
        return LineClass(LineTag.FILE, _file_path(line[len(FILE_PREFIX):]))
    if line.startswith(HUNK_PREFIX):
        return LineClass(LineTag.HUNK, line)
    if line[:1] in CONTENT_MARKERS:
        return LineClass(LineTag.CONTENT, line[1:], LineKind.from_marker(line[0]))
    return LineClass(LineTag.OTHER, line)


def split_lines(text: str) -> list[str]:
    """Découpe sur '\\n' et retire un '\\r' final (sorties CRLF)."""
    return [l[:-1] if l.endswith("\r") else l for l in text.split("\n")]


def _decode(data: bytes | bytearray | str) -> str:
    if isinstance(data, str):
        return data
    # octets non UTF-8 -> U+FFFD: le texte doit rester encodable pour les réponses JSON
    return bytes(data).decode("utf-8", errors="replace")


def parse_diff(data: bytes | bytearray | str) -> DiffTree:
    """
    Construit un DiffTree à partir de la sortie brute de `git diff`.

    Les lignes non reconnues (index, ---/+++, binaires, lignes hors contexte)
    sont ignorées sans erreur. Lève EmptyInputError sur un tampon vide et
    AllocationFailure si la mémoire manque; aucun arbre partiel n'est renvoyé.
    """
    if not data:
        raise EmptyInputError("Tampon vide")

    tree = DiffTree()
    current_file: Optional[DiffFile] = None
    current_hunk: Optional[DiffHunk] = None
    try:
        for line in split_lines(_decode(data)):
            cls = classify_line(line)
            if cls.tag is LineTag.FILE:
                current_file = DiffFile(path=cls.text)
                tree.files.append(current_file)
                current_hunk = None
            elif cls.tag is LineTag.HUNK and current_file is not None:
                current_hunk = DiffHunk(header=cls.text)
                current_file.hunks.append(current_hunk)
            elif cls.tag is LineTag.CONTENT and current_hunk is not None:
                current_hunk.lines.append(DiffLine(content=cls.text, kind=cls.kind))
    except MemoryError as e:
        raise AllocationFailure("Mémoire insuffisante pendant l'analyse du diff") from e
    return tree
