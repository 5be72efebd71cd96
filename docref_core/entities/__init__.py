"""Documentation records and the in-memory reference index."""

from .index import ReferenceIndex
from .models import Argument, Entity, SourceReference, Term

__all__ = [
    "Argument",
    "Entity",
    "ReferenceIndex",
    "SourceReference",
    "Term",
]
