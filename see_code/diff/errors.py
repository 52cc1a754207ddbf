from __future__ import annotations

class ParseError(Exception):
    """Base pour les échecs de construction d'un arbre de diff."""

class EmptyInputError(ParseError):
    """Tampon vide: rien à construire, rien à afficher."""

class AllocationFailure(ParseError):
    """Ressources épuisées pendant la construction de l'arbre."""

class JsonDocumentError(ParseError):
    """Document JSON illisible ou de forme inattendue."""
