from __future__ import annotations
import argparse
import sys
from pathlib import Path
from . import __version__
from .config import load_settings, PROFILES, Settings
from .diff.errors import ParseError
from .diff.parser import parse_diff
from .diff.tree import DiffTree, LineKind
from .tools.logs import log_event
from .view.layout import content_height

# === Affichage ================================================================
def _print_banner(phase_label: str):
    print(f"see_code v{__version__} — {phase_label}")

def _print_settings(config: str, s: Settings):
    print(f"config  = {repr(str(config))}")
    print(f"profile = {s.general.profile}")
    print(f"screen  = {s.screen.width}x{s.screen.height}")
    print(f"socket  = {s.transport.socket_path} ({'on' if s.transport.socket_enabled else 'off'})")
    print(f"http    = {s.transport.http_host}:{s.transport.http_port}")
    print(f"logs    = {s.general.log_dir} (verbose={s.general.verbose}, debug={s.general.debug})")

def _print_outline(tree: DiffTree, s: Settings) -> None:
    print("=== OUTLINE ===")
    for f in tree.files:
        print(f"{f.path or '(sans nom)'}  ({len(f.hunks)} hunks)")
        for h in f.hunks:
            added = sum(1 for l in h.lines if l.kind is LineKind.ADDED)
            removed = sum(1 for l in h.lines if l.kind is LineKind.REMOVED)
            print(f"  {h.header}  [+{added} -{removed} ={len(h.lines) - added - removed}]")
    height = content_height(tree, s.style.to_style())
    print(f"files={len(tree.files)} hunks={tree.hunk_count} lines={tree.line_count} height={height:.0f}")

def _read_input(path: str) -> bytes:
    if path == "-":
        return sys.stdin.buffer.read()
    return Path(path).read_bytes()

# === Arguments ================================================================
def _argparser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser("see_code", description="see_code — visualiseur interactif de git diff (Termux)")
    ap.add_argument("--config", default="config", help="Chemin vers le dossier de configuration.")
    ap.add_argument("--profile", choices=PROFILES, default="portrait", help="Orientation de l'écran.")
    ap.add_argument("-v", "--verbose", action="store_true", help="Journal recopié sur stderr.")
    ap.add_argument("-d", "--debug", action="store_true", help="Journal détaillé (toucher, bascules).")
    ap.add_argument("--socket", help="Chemin du socket Unix (remplace transport.socket_path).")
    ap.add_argument("--check-deps", action="store_true", help="Vérifier les dépendances et quitter.")
    ap.add_argument("--print", dest="print_file", metavar="FILE", help="Analyser un diff (- = stdin) et afficher son plan.")
    ap.add_argument("--send", metavar="FILE", help="Envoyer un diff (- = stdin) au visualiseur en cours.")
    ap.add_argument("--version", action="store_true", help="Afficher la version et quitter.")
    return ap

def build_parser() -> argparse.ArgumentParser:
    return _argparser()

# === Main ====================================================================
def main(argv: list[str] | None = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    if args.version:
        print(__version__)
        return 0

    s = load_settings(
        config=args.config,
        profile=args.profile,
        overrides={
            "verbose": True if args.verbose else None,
            "debug": True if args.debug else None,
            "socket_path": args.socket,
        },
    )

    if args.check_deps:
        from .tools.deps import check_all, format_report
        statuses = check_all(s)
        print(format_report(statuses))
        return 0 if all(st.ok for st in statuses) else 1

    if args.print_file:
        try:
            tree = parse_diff(_read_input(args.print_file))
        except (OSError, ParseError) as e:
            print(f"ERR: {e}", file=sys.stderr)
            return 1
        _print_outline(tree, s)
        return 0

    if args.send:
        from .transport.errors import TransportError
        from .transport.socket_server import send_diff
        try:
            ok = send_diff(s.transport.socket_path, _read_input(args.send))
        except (OSError, TransportError) as e:
            print(f"ERR: {e}", file=sys.stderr)
            return 2
        print("sent: ok" if ok else "sent: rejected")
        return 0 if ok else 1

    _print_banner("viewer")
    _print_settings(args.config, s)
    log_event(s, f"starting see_code v{__version__} (profile={s.general.profile})")
    from .web.server import serve
    return serve(s)

if __name__ == "__main__":
    raise SystemExit(main())
