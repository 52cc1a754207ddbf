from __future__ import annotations
from dataclasses import dataclass, field, fields
from pathlib import Path
import tomllib, os

from .view.layout import Style

PROFILES = ["portrait", "landscape"]
LOG_LEVELS = ["debug", "info", "warn", "error"]

@dataclass
class General:
    profile: str = "portrait"
    verbose: bool = False
    debug: bool = False
    log_dir: str = "data/logs"

@dataclass
class Transport:
    socket_enabled: bool = True
    socket_path: str = "/data/data/com.termux/files/usr/tmp/see_code_socket"
    max_message_size: int = 50 * 1024 * 1024
    buffer_size: int = 8192
    http_host: str = "127.0.0.1"
    http_port: int = 8765

@dataclass
class Screen:
    width: int = 1080
    height: int = 2400

@dataclass
class StyleSection:
    file_header_height: float = 36.0
    hunk_header_height: float = 36.0
    line_height: float = 36.0
    file_margin: float = 10.0
    hunk_margin: float = 5.0
    scroll_sensitivity: float = 10.0
    indent: float = 24.0
    font_size: int = 14
    header_font_size: int = 16
    # couleurs ARGB; les clés absentes gardent la valeur par défaut de Style
    colors: dict[str, int] = field(default_factory=dict)

    def to_style(self) -> Style:
        base = Style()
        colors = dict(base.colors)
        colors.update({k: int(v) for k, v in self.colors.items()})
        return Style(
            file_header_height=float(self.file_header_height),
            hunk_header_height=float(self.hunk_header_height),
            line_height=float(self.line_height),
            file_margin=float(self.file_margin),
            hunk_margin=float(self.hunk_margin),
            scroll_sensitivity=float(self.scroll_sensitivity),
            indent=float(self.indent),
            font_size=int(self.font_size),
            header_font_size=int(self.header_font_size),
            colors=colors,
        )

@dataclass
class Settings:
    general: General
    transport: Transport
    screen: Screen
    style: StyleSection

def _load_toml_if_exists(path: Path) -> dict:
    if path.exists():
        with path.open("rb") as f:
            return tomllib.load(f)
    return {}

def _read_profile_toml(config_path: Path, profile: str) -> dict:
    """
    Cherche dans:
      - config/defaults.toml et config/<profile>.toml
      - puis fallback: config/profiles/defaults.toml et config/profiles/<profile>.toml
    """
    cfg_dir = config_path if config_path.is_dir() else config_path.parent

    data = _load_toml_if_exists(cfg_dir / "defaults.toml")
    if not data:
        data = _load_toml_if_exists(cfg_dir / "profiles" / "defaults.toml")

    prof = _load_toml_if_exists(cfg_dir / f"{profile}.toml")
    if not prof:
        prof = _load_toml_if_exists(cfg_dir / "profiles" / f"{profile}.toml")

    # Fusion superficielle defaults <- profil
    base = data or {}
    for k, v in prof.items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            base[k].update(v)
        else:
            base[k] = v
    return base

def _filter_for_dataclass(cls, data: dict) -> dict:
    """Ne garde que les clés connues du dataclass (évite TypeError sur clés en trop)."""
    allowed = {f.name for f in fields(cls)}
    return {k: v for k, v in (data or {}).items() if k in allowed}

def load_settings(config: str | None, profile: str = "portrait", overrides: dict | None = None) -> Settings:
    config_path = Path(config) if config else Path("config")
    raw = _read_profile_toml(config_path, profile)
    raw.setdefault("general", {})["profile"] = profile

    # Socket via env prioritaire (le plugin éditeur peut le fixer)
    env_socket = os.environ.get("SEE_CODE_SOCKET")
    if env_socket:
        raw.setdefault("transport", {})["socket_path"] = env_socket

    g = General(**_filter_for_dataclass(General, raw.get("general")))
    t = Transport(**_filter_for_dataclass(Transport, raw.get("transport")))
    sc = Screen(**_filter_for_dataclass(Screen, raw.get("screen")))
    st = StyleSection(**_filter_for_dataclass(StyleSection, raw.get("style")))

    # Overrides CLI: cherchés dans general puis transport
    if overrides:
        for k, val in overrides.items():
            if val is None:
                continue
            for section in (g, t):
                if hasattr(section, k):
                    setattr(section, k, val)
                    break

    return Settings(general=g, transport=t, screen=sc, style=st)
