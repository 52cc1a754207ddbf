from __future__ import annotations
import threading
from typing import Callable, List, Optional

from ..diff.errors import ParseError
from ..diff.parser import parse_diff
from ..diff.document import parse_json_document, tree_to_document, MAX_FILES
from ..diff.tree import DiffTree
from ..view.hit import NoTarget, ToggledFile, hit_test, locate
from ..view.layout import Layout, Style, layout
from ..view.render import RenderNode, Viewport, visible_nodes
from ..view.scroll import apply_delta, clamp_scroll, max_scroll

__all__ = ["DiffViewer"]

LogFn = Callable[..., None]


def _no_log(message: str, level: str = "info") -> None:
    return None


class DiffViewer:
    """
    État complet d'une session d'affichage: arbre, drapeaux repliés, décalage
    de défilement, géométrie en cache et taille de fenêtre.

    Tout passe par un verrou unique: le thread du transport (load) et la boucle
    de rendu/saisie (on_touch, on_scroll, lecture des noeuds) ne voient jamais
    un arbre sans sa géométrie ni un défilement borné sur une hauteur périmée.
    """

    def __init__(self, style: Style | None = None, viewport: Viewport | None = None, *, log: LogFn | None = None):
        self.style = style or Style()
        self.viewport = viewport or Viewport(1080.0, 2400.0)
        self._log = log or _no_log
        self._lock = threading.Lock()
        self._tree: Optional[DiffTree] = None
        self._layout: Layout = layout(None, self.style)
        self._scroll_y = 0.0
        self.revision = 0

    # ---------------- interne (verrou déjà pris) ----------------
    def _relayout(self) -> None:
        self._layout = layout(self._tree, self.style)
        self._scroll_y = clamp_scroll(self._scroll_y, self._layout.content_height, self.viewport.height)

    def _bump(self) -> None:
        self.revision += 1

    def _replace(self, tree: Optional[DiffTree]) -> None:
        self._tree = tree
        self._scroll_y = 0.0
        self._relayout()
        self._bump()

    def _load_with(self, build: Callable[[], DiffTree], size: int, what: str) -> bool:
        try:
            tree = build()
        except ParseError as e:
            # un rechargement raté efface aussi l'ancien arbre
            with self._lock:
                self._replace(None)
            self._log(f"load failed ({what}, {size} bytes): {type(e).__name__}: {e}", "error")
            return False
        with self._lock:
            self._replace(tree)
            height = self._layout.content_height
        self._log(
            f"loaded {what}: {len(tree.files)} files, {tree.hunk_count} hunks, "
            f"{tree.line_count} lines ({size} bytes, height={height:.0f})"
        )
        return True

    # ---------------- chargement ----------------
    def load(self, buffer: bytes) -> bool:
        """Remplace l'arbre par celui du diff brut. False si rien n'est affiché."""
        return self._load_with(lambda: parse_diff(buffer), len(buffer), "diff")

    def load_json(self, document: str | bytes) -> bool:
        def _warn(n: int) -> None:
            self._log(f"JSON document has {n} files, truncated to {MAX_FILES}", "warn")
        return self._load_with(lambda: parse_json_document(document, on_truncate=_warn), len(document), "json")

    def clear(self) -> None:
        with self._lock:
            self._replace(None)

    # ---------------- saisie ----------------
    def on_touch(self, x: float, y: float) -> bool:
        """True si un en-tête a été basculé (il faut redessiner)."""
        with self._lock:
            res = hit_test(self._tree, x, y, self._scroll_y, self.style)
            if isinstance(res, NoTarget):
                self._log(f"touch ({x:.1f}, {y:.1f}) hit no header", "debug")
                return False
            self._relayout()
            self._bump()
        if isinstance(res, ToggledFile):
            self._log(f"toggled file #{res.file_index}", "debug")
        else:
            self._log(f"toggled hunk #{res.file_index}.{res.hunk_index}", "debug")
        return True

    def on_scroll(self, delta_y: float) -> None:
        with self._lock:
            new = apply_delta(
                self._scroll_y, delta_y, self._layout.content_height,
                self.viewport.height, self.style.scroll_sensitivity,
            )
            if new != self._scroll_y:
                self._scroll_y = new
                self._bump()

    def on_resize(self, width: float, height: float) -> None:
        with self._lock:
            self.viewport = Viewport(float(width), float(height))
            self._relayout()
            self._bump()
        self._log(f"viewport resized to {width:.0f}x{height:.0f}")

    # ---------------- lecture ----------------
    @property
    def scroll_y(self) -> float:
        with self._lock:
            return self._scroll_y

    def get_content_height(self) -> float:
        with self._lock:
            return self._layout.content_height

    def get_visible_nodes_for_render(self, viewport: Viewport | None = None) -> List[RenderNode]:
        with self._lock:
            vp = viewport or self.viewport
            # une autre fenêtre que celle enregistrée a sa propre borne de défilement
            scroll = clamp_scroll(self._scroll_y, self._layout.content_height, vp.height)
            return visible_nodes(self._tree, self.style, scroll, vp)

    def describe_point(self, x: float, y: float) -> dict | None:
        """Ce qui se trouve sous un point écran (sans basculer quoi que ce soit)."""
        with self._lock:
            band = locate(self._tree, x, y, self._scroll_y, self.style)
            if band is None:
                return None
            return {
                "kind": band.kind.value,
                "file_index": band.file_index,
                "hunk_index": band.hunk_index,
                "line_index": band.line_index,
            }

    def document(self) -> list[dict]:
        with self._lock:
            if self._tree is None:
                return []
            return tree_to_document(self._tree, with_state=True)

    def snapshot(self) -> dict:
        with self._lock:
            t = self._tree
            return {
                "revision": self.revision,
                "loaded": t is not None,
                "files": len(t.files) if t else 0,
                "hunks": t.hunk_count if t else 0,
                "lines": t.line_count if t else 0,
                "scroll_y": self._scroll_y,
                "max_scroll": max_scroll(self._layout.content_height, self.viewport.height),
                "content_height": self._layout.content_height,
                "viewport": {"width": self.viewport.width, "height": self.viewport.height},
                "collapsed_files": [i for i, f in enumerate(t.files) if f.collapsed] if t else [],
            }
