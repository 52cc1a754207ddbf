from __future__ import annotations
import importlib.util, os, sys
from dataclasses import dataclass
from pathlib import Path
from typing import List
from ..config import Settings

# module importable -> rôle dans l'application
PY_MODULES = {
    "fastapi": "interface web (rendu de secours)",
    "uvicorn": "serveur HTTP",
    "jinja2": "gabarits HTML",
}

@dataclass
class DepStatus:
    name: str
    ok: bool
    detail: str

def has_module(name: str) -> bool:
    return importlib.util.find_spec(name) is not None

def _check_python() -> DepStatus:
    ok = sys.version_info >= (3, 11)
    return DepStatus("python", ok, f"{sys.version.split()[0]} (>= 3.11 requis pour tomllib)")

def _check_socket_dir(settings: Settings) -> DepStatus:
    d = Path(settings.transport.socket_path).parent
    if not settings.transport.socket_enabled:
        return DepStatus("socket", True, "transport socket désactivé")
    if d.is_dir() and os.access(d, os.W_OK):
        return DepStatus("socket", True, f"{d} accessible en écriture")
    return DepStatus("socket", False, f"{d} absent ou non inscriptible (voir SEE_CODE_SOCKET)")

def _check_log_dir(settings: Settings) -> DepStatus:
    d = Path(settings.general.log_dir).absolute()
    # le dossier est créé à la demande: on teste le premier parent existant
    probe = d
    while not probe.exists() and probe != probe.parent:
        probe = probe.parent
    ok = os.access(probe, os.W_OK)
    return DepStatus("logs", ok, str(d))

def check_all(settings: Settings) -> List[DepStatus]:
    out = [_check_python()]
    for mod, role in PY_MODULES.items():
        ok = has_module(mod)
        out.append(DepStatus(mod, ok, role if ok else f"manquant: pip install {mod}"))
    out.append(_check_socket_dir(settings))
    out.append(_check_log_dir(settings))
    return out

def format_report(statuses: List[DepStatus]) -> str:
    lines = ["=== Dépendances ==="]
    for s in statuses:
        lines.append(f"[{'OK' if s.ok else 'KO'}] {s.name:<8} {s.detail}")
    missing = sum(1 for s in statuses if not s.ok)
    lines.append("Tout est en place." if not missing else f"{missing} problème(s) détecté(s).")
    return "\n".join(lines)
