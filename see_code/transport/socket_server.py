from __future__ import annotations
import os
import socket
import socketserver
import threading
from pathlib import Path
from typing import Callable, Optional

from .errors import MessageTooLarge, TransportError

__all__ = ["DiffSocketServer", "read_message", "send_diff"]

MessageCallback = Callable[[bytes], bool]


def read_message(sock: socket.socket, *, buffer_size: int, max_size: int) -> bytes:
    """Lit jusqu'à EOF: une connexion = un message complet."""
    chunks: list[bytes] = []
    total = 0
    while True:
        chunk = sock.recv(buffer_size)
        if not chunk:
            break
        total += len(chunk)
        if total > max_size:
            raise MessageTooLarge(f"message > {max_size} bytes")
        chunks.append(chunk)
    return b"".join(chunks)


class _Handler(socketserver.BaseRequestHandler):
    server: "_UnixServer"

    def handle(self) -> None:
        owner = self.server.owner
        owner.log("client connected", "debug")
        try:
            data = read_message(self.request, buffer_size=owner.buffer_size, max_size=owner.max_message_size)
        except MessageTooLarge as e:
            owner.log(f"message dropped: {e}", "warn")
            self._ack(False)
            return
        except OSError as e:
            owner.log(f"receive error: {e}", "error")
            return
        owner.log(f"client disconnected, received {len(data)} bytes")
        self._ack(owner.on_message(data))

    def _ack(self, ok: bool) -> None:
        try:
            # accusé de réception d'un octet pour le client éditeur
            self.request.sendall(b"1" if ok else b"0")
        except OSError as e:
            self.server.owner.log(f"ack not delivered: {e}", "debug")


class _UnixServer(socketserver.UnixStreamServer):
    owner: "DiffSocketServer"


class DiffSocketServer:
    """
    Serveur socket Unix, une connexion à la fois, un message par connexion.
    Le message complet est passé à on_message (typiquement DiffViewer.load).
    """
    def __init__(
        self,
        socket_path: str | Path,
        on_message: MessageCallback,
        *,
        buffer_size: int = 8192,
        max_message_size: int = 50 * 1024 * 1024,
        log: Callable[..., None] | None = None,
    ) -> None:
        self.socket_path = Path(socket_path)
        self.on_message = on_message
        self.buffer_size = buffer_size
        self.max_message_size = max_message_size
        self.log = log or (lambda message, level="info": None)
        self._server: Optional[_UnixServer] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        # un ancien fichier socket bloquerait bind()
        if self.socket_path.exists():
            self.socket_path.unlink()
        self.socket_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self._server = _UnixServer(str(self.socket_path), _Handler)
        except OSError as e:
            raise TransportError(f"Impossible d'écouter sur {self.socket_path}: {e}") from e
        self._server.owner = self
        self._thread = threading.Thread(target=self._server.serve_forever, name="see_code-socket", daemon=True)
        self._thread.start()
        self.log(f"socket server listening on {self.socket_path}")

    def stop(self) -> None:
        if self._server is None:
            return
        self._server.shutdown()
        self._server.server_close()
        if self._thread is not None:
            self._thread.join(timeout=5)
        self._server = None
        self._thread = None
        if self.socket_path.exists():
            os.unlink(self.socket_path)
        self.log("socket server stopped")

    def __enter__(self) -> "DiffSocketServer":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.stop()


def send_diff(socket_path: str | Path, data: bytes, *, timeout: float = 10.0) -> bool:
    """Côté éditeur: envoie un diff complet et attend l'accusé de réception."""
    with socket.socket(socket.AF_UNIX, socket.SOCK_STREAM) as s:
        s.settimeout(timeout)
        try:
            s.connect(str(socket_path))
            s.sendall(data)
            s.shutdown(socket.SHUT_WR)
            ack = s.recv(1)
        except OSError as e:
            raise TransportError(f"Envoi impossible vers {socket_path}: {e}") from e
    return ack == b"1"
