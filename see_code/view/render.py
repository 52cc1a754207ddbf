from __future__ import annotations
from dataclasses import dataclass, asdict
from typing import List, Optional

from ..diff.tree import DiffTree, LineKind
from .layout import BandKind, Style, iter_bands

__all__ = ["Viewport", "Rect", "NodeStyle", "RenderNode", "visible_nodes", "PLACEHOLDER_TEXT"]

PLACEHOLDER_TEXT = "No diff data available"
EXPANDED = "▾"
COLLAPSED = "▸"


@dataclass(frozen=True)
class Viewport:
    width: float
    height: float


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float


@dataclass(frozen=True)
class NodeStyle:
    background: int  # ARGB
    foreground: int
    font_size: int


@dataclass(frozen=True)
class RenderNode:
    kind: str  # file_header | hunk_header | line | placeholder
    text: str
    rect: Rect
    style: NodeStyle

    def to_dict(self) -> dict:
        return asdict(self)


_LINE_COLOR = {LineKind.ADDED: "added", LineKind.REMOVED: "removed", LineKind.CONTEXT: "context"}


def visible_nodes(tree: Optional[DiffTree], style: Style, scroll_y: float, viewport: Viewport) -> List[RenderNode]:
    """
    Noeuds à dessiner pour la fenêtre [scroll_y, scroll_y + hauteur), en
    coordonnées écran. Le moteur de rendu n'a plus qu'à remplir des rectangles
    et à écrire du texte dedans.
    """
    c = style.colors
    if tree is None or not tree.files:
        return [RenderNode(
            "placeholder", PLACEHOLDER_TEXT,
            Rect(0.0, 0.0, viewport.width, style.line_height),
            NodeStyle(c["background"], c["text_secondary"], style.font_size),
        )]

    bottom = scroll_y + viewport.height
    out: List[RenderNode] = []
    for band in iter_bands(tree, style):
        if band.top >= bottom:
            break
        if band.bottom <= scroll_y or band.kind in (BandKind.HUNK_MARGIN, BandKind.FILE_MARGIN):
            continue
        f = tree.files[band.file_index]
        if band.kind is BandKind.FILE_HEADER:
            x = 0.0
            text = f"{COLLAPSED if f.collapsed else EXPANDED} {f.path}"
            ns = NodeStyle(c["file_header"], c["text_primary"], style.header_font_size)
        elif band.kind is BandKind.HUNK_HEADER:
            h = f.hunks[band.hunk_index]
            x = style.indent
            text = f"{COLLAPSED if h.collapsed else EXPANDED} {h.header}"
            ns = NodeStyle(c["hunk_header"], c["text_secondary"], style.font_size)
        else:
            line = f.hunks[band.hunk_index].lines[band.line_index]
            x = style.indent * 2
            text = line.raw
            ns = NodeStyle(c["background"], c[_LINE_COLOR[line.kind]], style.font_size)
        rect = Rect(x, band.top - scroll_y, max(0.0, viewport.width - x), band.height)
        out.append(RenderNode(band.kind.value, text, rect, ns))
    return out
