from .errors import AllocationFailure, EmptyInputError, JsonDocumentError, ParseError
from .tree import DiffFile, DiffHunk, DiffLine, DiffTree, LineKind
from .parser import classify_line, parse_diff
from .document import parse_json_document, tree_to_document

__all__ = [
    "AllocationFailure", "EmptyInputError", "JsonDocumentError", "ParseError",
    "DiffFile", "DiffHunk", "DiffLine", "DiffTree", "LineKind",
    "classify_line", "parse_diff", "parse_json_document", "tree_to_document",
]
