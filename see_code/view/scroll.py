from __future__ import annotations

__all__ = ["max_scroll", "clamp_scroll", "apply_delta"]


def max_scroll(content_height: float, viewport_height: float) -> float:
    return max(0.0, content_height - viewport_height)


def clamp_scroll(scroll_y: float, content_height: float, viewport_height: float) -> float:
    """Ramène scroll_y dans [0, max(0, contenu - fenêtre)]."""
    return min(max(0.0, scroll_y), max_scroll(content_height, viewport_height))


def apply_delta(
    scroll_y: float,
    delta: float,
    content_height: float,
    viewport_height: float,
    sensitivity: float = 1.0,
) -> float:
    return clamp_scroll(scroll_y + delta * sensitivity, content_height, viewport_height)
