from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, Union

from ..diff.tree import DiffTree
from .layout import Band, BandKind, Style, iter_bands

__all__ = ["ToggledFile", "ToggledHunk", "NoTarget", "HitResult", "hit_test", "locate"]


@dataclass(frozen=True)
class ToggledFile:
    file_index: int


@dataclass(frozen=True)
class ToggledHunk:
    file_index: int
    hunk_index: int


@dataclass(frozen=True)
class NoTarget:
    pass


HitResult = Union[ToggledFile, ToggledHunk, NoTarget]


def locate(tree: Optional[DiffTree], x: float, y: float, scroll_y: float, style: Style) -> Optional[Band]:
    """Bande sous le point touché (coordonnées écran), sans rien modifier."""
    content_y = y + scroll_y
    for band in iter_bands(tree, style):
        if band.top > content_y:
            break
        if band.contains(content_y):
            return band
    return None


def hit_test(tree: Optional[DiffTree], x: float, y: float, scroll_y: float, style: Style) -> HitResult:
    """
    Bascule l'état replié de l'en-tête touché.

    Le premier en-tête dont la bande contient y + scroll_y gagne; une ligne de
    contenu, une marge ou le vide sous le contenu donnent NoTarget.
    """
    band = locate(tree, x, y, scroll_y, style)
    if band is None or not band.is_header:
        return NoTarget()
    f = tree.files[band.file_index]
    if band.kind is BandKind.FILE_HEADER:
        f.collapsed = not f.collapsed
        return ToggledFile(band.file_index)
    h = f.hunks[band.hunk_index]
    h.collapsed = not h.collapsed
    return ToggledHunk(band.file_index, band.hunk_index)
