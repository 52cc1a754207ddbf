from __future__ import annotations
import json
from typing import Any

from .errors import AllocationFailure, EmptyInputError, JsonDocumentError
from .tree import DiffFile, DiffHunk, DiffLine, DiffTree, LineKind

__all__ = ["MAX_FILES", "parse_json_document", "tree_to_document"]

MAX_FILES = 256


def _line_from_json(raw: Any) -> DiffLine:
    if not isinstance(raw, str):
        raise JsonDocumentError(f"Ligne non textuelle: {raw!r}")
    kind = LineKind.from_marker(raw[:1])
    # une ligne sans marqueur reconnu reste du contexte, texte intact
    content = raw[1:] if raw[:1] in ("+", "-", " ") else raw
    return DiffLine(content=content, kind=kind)


def _hunk_from_json(raw: Any) -> DiffHunk:
    if not isinstance(raw, dict):
        raise JsonDocumentError("Hunk attendu sous forme d'objet")
    header = raw.get("header", "")
    lines = raw.get("lines", [])
    if not isinstance(header, str) or not isinstance(lines, list):
        raise JsonDocumentError("Hunk mal formé (header: str, lines: list)")
    return DiffHunk(header=header, lines=[_line_from_json(l) for l in lines])


def _file_from_json(raw: Any) -> DiffFile:
    if not isinstance(raw, dict):
        raise JsonDocumentError("Fichier attendu sous forme d'objet")
    path = raw.get("path", "")
    hunks = raw.get("hunks", [])
    if not isinstance(path, str) or not isinstance(hunks, list):
        raise JsonDocumentError("Fichier mal formé (path: str, hunks: list)")
    return DiffFile(path=path, hunks=[_hunk_from_json(h) for h in hunks])


def parse_json_document(document: str | bytes, *, on_truncate=None) -> DiffTree:
    """
    Variante structurée de l'entrée:
      [{"path": "...", "hunks": [{"header": "@@ ... @@", "lines": ["+x", "-y", " z"]}]}]
    Au-delà de MAX_FILES fichiers, la liste est tronquée (on_truncate(n) est appelé).
    """
    if not document:
        raise EmptyInputError("Document vide")
    try:
        root = json.loads(document)
    except (ValueError, UnicodeDecodeError) as e:
        raise JsonDocumentError(f"JSON invalide: {e}") from e
    if not isinstance(root, list):
        raise JsonDocumentError("La racine du document doit être une liste")
    if len(root) > MAX_FILES:
        if on_truncate:
            on_truncate(len(root))
        root = root[:MAX_FILES]
    try:
        return DiffTree(files=[_file_from_json(f) for f in root])
    except MemoryError as e:
        raise AllocationFailure("Mémoire insuffisante pendant le chargement JSON") from e


def tree_to_document(tree: DiffTree, *, with_state: bool = False) -> list[dict]:
    out: list[dict] = []
    for f in tree.files:
        hunks = []
        for h in f.hunks:
            item: dict = {"header": h.header, "lines": [l.raw for l in h.lines]}
            if with_state:
                item["collapsed"] = h.collapsed
            hunks.append(item)
        entry: dict = {"path": f.path, "hunks": hunks}
        if with_state:
            entry["collapsed"] = f.collapsed
        out.append(entry)
    return out
