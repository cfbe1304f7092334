from yed_graphml.exceptions.document import (
    GraphMLError,
    DocumentError,
    DuplicateIdError,
    DanglingReferenceError,
    TemplateNotFoundError,
    DocumentWriteError,
    DocumentIntegrityError,
)
from yed_graphml.exceptions.reference import (
    CyclicReferenceError,
    TypeMismatchError,
    UninitializedReferenceError,
)

__all__ = [
    "GraphMLError",
    "DocumentError",
    "DuplicateIdError",
    "DanglingReferenceError",
    "TemplateNotFoundError",
    "DocumentWriteError",
    "DocumentIntegrityError",
    "CyclicReferenceError",
    "TypeMismatchError",
    "UninitializedReferenceError",
]
