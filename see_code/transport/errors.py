from __future__ import annotations

class TransportError(Exception):
    """Base pour les erreurs du transport local."""

class MessageTooLarge(TransportError):
    """Message plus gros que transport.max_message_size."""
