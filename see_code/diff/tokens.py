from __future__ import annotations
from typing import List

__all__ = ["scan_tokens", "strip_side_prefix"]

# échappements C reconnus par git dans les chemins entre guillemets
_ESCAPES = {
    "\\": b"\\",
    '"': b'"',
    "a": b"\a",
    "b": b"\b",
    "f": b"\f",
    "n": b"\n",
    "r": b"\r",
    "t": b"\t",
    "v": b"\v",
}
_OCTAL = "01234567"


def _scan_quoted(text: str, i: int) -> tuple[str, int]:
    """
    Lit un jeton entre guillemets à partir de text[i] == '"'.
    Renvoie (jeton décodé, index juste après le guillemet fermant).

    Les octets octaux (\\303\\251) sont regroupés puis décodés en UTF-8,
    comme git les émet quand core.quotePath est actif.
    Un guillemet non fermé prend tout le reste de la ligne.
    """
    out = bytearray()
    i += 1
    n = len(text)
    while i < n:
        ch = text[i]
        if ch == '"':
            return out.decode("utf-8", errors="replace"), i + 1
        if ch == "\\" and i + 1 < n:
            nxt = text[i + 1]
            if nxt in _OCTAL:
                j = i + 1
                while j < n and j < i + 4 and text[j] in _OCTAL:
                    j += 1
                out.append(int(text[i + 1:j], 8) & 0xFF)
                i = j
                continue
            # échappement inconnu: le caractère est gardé tel quel
            out += _ESCAPES.get(nxt, nxt.encode("utf-8"))
            i += 2
            continue
        out += ch.encode("utf-8")
        i += 1
    return out.decode("utf-8", errors="replace"), i


def scan_tokens(text: str) -> List[str]:
    """Découpe `text` en jetons nus (séparés par des blancs) ou entre guillemets."""
    tokens: List[str] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i].isspace():
            i += 1
            continue
        if text[i] == '"':
            tok, i = _scan_quoted(text, i)
            tokens.append(tok)
            continue
        j = i
        while j < n and not text[j].isspace():
            j += 1
        tokens.append(text[i:j])
        i = j
    return tokens


def strip_side_prefix(path: str, side: str) -> str:
    """Retire le préfixe 'a/' ou 'b/' s'il est présent."""
    prefix = f"{side}/"
    if path.startswith(prefix):
        return path[len(prefix):]
    return path
