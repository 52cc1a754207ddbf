from __future__ import annotations
import sys
from datetime import datetime, timezone
from pathlib import Path
from ..config import Settings, LOG_LEVELS

LOG_NAME = "see_code.log"

def log_path(settings: Settings) -> Path:
    return Path(settings.general.log_dir) / LOG_NAME

def log_event(settings: Settings, message: str, level: str = "info") -> Path | None:
    """
    Ajoute une ligne 'ts | LEVEL | message' au journal.
    Les lignes debug ne sont écrites qu'en mode debug; en mode verbose elles
    sont aussi recopiées sur stderr. Renvoie le chemin écrit (None si filtré).
    """
    level = level if level in LOG_LEVELS else "info"
    if level == "debug" and not settings.general.debug:
        return None
    path = log_path(settings)
    path.parent.mkdir(parents=True, exist_ok=True)
    ts = datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z")
    line = f"{ts} | {level.upper()} | {message}"
    with path.open("a", encoding="utf-8") as f:
        f.write(line + "\n")
    if settings.general.verbose or level == "error":
        print(line, file=sys.stderr)
    return path

def make_logger(settings: Settings):
    """Callable (message, level) pour les composants qui ne connaissent pas Settings."""
    def _log(message: str, level: str = "info") -> None:
        log_event(settings, message, level)
    return _log
