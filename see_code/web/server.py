from __future__ import annotations
import uvicorn
from ..config import Settings
from ..tools.logs import log_event, make_logger
from ..transport.errors import TransportError
from ..transport.socket_server import DiffSocketServer
from .app import create_app

def serve(settings: Settings) -> int:
    """Interface web + transport socket; bloque jusqu'à l'arrêt d'uvicorn."""
    app = create_app(settings)
    viewer = app.state.viewer

    sock: DiffSocketServer | None = None
    if settings.transport.socket_enabled:
        sock = DiffSocketServer(
            settings.transport.socket_path,
            viewer.load,
            buffer_size=settings.transport.buffer_size,
            max_message_size=settings.transport.max_message_size,
            log=make_logger(settings),
        )
        try:
            sock.start()
        except TransportError as e:
            # l'interface web reste utilisable (POST /api/diff)
            log_event(settings, f"socket transport disabled: {e}", "error")
            sock = None

    log_event(settings, f"web UI on http://{settings.transport.http_host}:{settings.transport.http_port}")
    try:
        uvicorn.run(
            app,
            host=settings.transport.http_host,
            port=int(settings.transport.http_port),
            log_level="debug" if settings.general.debug else "info",
        )
    finally:
        if sock is not None:
            sock.stop()
        log_event(settings, "shutdown complete")
    return 0
