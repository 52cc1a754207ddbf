from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterator, Optional, Tuple

from ..diff.tree import DiffTree

__all__ = ["Style", "BandKind", "Band", "Extent", "Layout", "iter_bands", "layout", "content_height"]


@dataclass(frozen=True)
class Style:
    """Constantes de géométrie et d'affichage (valeurs par défaut = écran 1080x2400)."""
    file_header_height: float = 36.0
    hunk_header_height: float = 36.0
    line_height: float = 36.0
    file_margin: float = 10.0
    hunk_margin: float = 5.0
    scroll_sensitivity: float = 10.0
    # affichage seulement, sans effet sur la géométrie verticale
    indent: float = 24.0
    font_size: int = 14
    header_font_size: int = 16
    colors: Dict[str, int] = field(default_factory=lambda: {
        "background": 0xFF1E1E1E,
        "file_header": 0xFF2D2D30,
        "hunk_header": 0xFF404040,
        "added": 0xFF00AA00,
        "removed": 0xFFAA0000,
        "context": 0xFFCCCCCC,
        "text_primary": 0xFFFFFFFF,
        "text_secondary": 0xFFAAAAAA,
    })


class BandKind(str, Enum):
    FILE_HEADER = "file_header"
    HUNK_HEADER = "hunk_header"
    LINE = "line"
    HUNK_MARGIN = "hunk_margin"
    FILE_MARGIN = "file_margin"


@dataclass(frozen=True)
class Band:
    kind: BandKind
    top: float
    height: float
    file_index: int
    hunk_index: Optional[int] = None
    line_index: Optional[int] = None

    @property
    def bottom(self) -> float:
        return self.top + self.height

    @property
    def is_header(self) -> bool:
        return self.kind in (BandKind.FILE_HEADER, BandKind.HUNK_HEADER)

    def contains(self, y: float) -> bool:
        return self.top <= y < self.bottom


@dataclass(frozen=True)
class Extent:
    top: float
    bottom: float

    @property
    def height(self) -> float:
        return self.bottom - self.top


@dataclass
class Layout:
    extents: Dict[Tuple[int, ...], Extent]
    content_height: float


def iter_bands(tree: Optional[DiffTree], style: Style) -> Iterator[Band]:
    """
    Parcours unique de la géométrie verticale, dans l'ordre du document.

    Chaque bande couvre [top, top + height) en espace contenu. Les marges sont
    émises comme des bandes à part pour que la fin de la dernière bande soit
    exactement la hauteur du contenu. Les enfants d'un noeud replié ne sont
    pas émis. Layout, hit-test et rendu consomment tous ce générateur.
    """
    if tree is None:
        return
    cursor = 0.0
    for fi, f in enumerate(tree.files):
        yield Band(BandKind.FILE_HEADER, cursor, style.file_header_height, fi)
        cursor += style.file_header_height
        if not f.collapsed:
            for hi, h in enumerate(f.hunks):
                yield Band(BandKind.HUNK_HEADER, cursor, style.hunk_header_height, fi, hi)
                cursor += style.hunk_header_height
                if not h.collapsed:
                    for li in range(len(h.lines)):
                        yield Band(BandKind.LINE, cursor, style.line_height, fi, hi, li)
                        cursor += style.line_height
                yield Band(BandKind.HUNK_MARGIN, cursor, style.hunk_margin, fi, hi)
                cursor += style.hunk_margin
        yield Band(BandKind.FILE_MARGIN, cursor, style.file_margin, fi)
        cursor += style.file_margin


def content_height(tree: Optional[DiffTree], style: Style) -> float:
    end = 0.0
    for band in iter_bands(tree, style):
        end = band.bottom
    return end


def layout(tree: Optional[DiffTree], style: Style) -> Layout:
    """
    Étendue verticale de chaque fichier (clé (fi,)) et hunk (clé (fi, hi)):
    en-tête + sous-arbre visible. La marge propre au noeud n'en fait pas partie.
    """
    extents: Dict[Tuple[int, ...], Extent] = {}
    end = 0.0
    for band in iter_bands(tree, style):
        end = band.bottom
        fkey = (band.file_index,)
        hkey = (band.file_index, band.hunk_index)
        if band.kind is BandKind.FILE_HEADER:
            extents[fkey] = Extent(band.top, band.bottom)
            continue
        if band.kind is BandKind.FILE_MARGIN:
            continue
        extents[fkey] = Extent(extents[fkey].top, band.bottom)
        if band.kind is BandKind.HUNK_HEADER:
            extents[hkey] = Extent(band.top, band.bottom)
        elif band.kind is BandKind.LINE:
            extents[hkey] = Extent(extents[hkey].top, band.bottom)
    return Layout(extents=extents, content_height=end)
