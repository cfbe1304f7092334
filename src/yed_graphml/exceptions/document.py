'''Custom exceptions for document registry and build failures.'''
from typing import Optional, Union

ElementId = Union[str, int]


class GraphMLError(Exception):
    """Base exception for all errors raised by yed_graphml"""
    def __init__(self, message: str, element_id: Optional[ElementId] = None):
        self.element_id = element_id
        if element_id is not None:
            message = f"{message} (Element ID: {element_id})"
        super().__init__(message)


class DocumentError(GraphMLError):
    """Base exception for document registry and build errors"""


class DuplicateIdError(DocumentError):
    """Raised when an entity is registered under an id that is already in use"""


class DanglingReferenceError(DocumentError):
    """Raised when a node or edge references an entity not part of the document"""
    def __init__(self, message: str, element_id: ElementId, referenced_id: ElementId):
        self.referenced_id = referenced_id
        super().__init__(message, element_id)


class TemplateNotFoundError(DocumentError, LookupError):
    """Raised when a template name is not registered"""
    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"No such {kind} template: '{name}'")


class DocumentWriteError(DocumentError):
    """Raised when the built document could not be written to disk"""
    def __init__(self, filename, reason: str):
        self.filename = filename
        super().__init__(f"Couldn't write document to '{filename}': {reason}")


class DocumentIntegrityError(DocumentError):
    """Raised by an integrity check when an issue is severe enough for the validation level"""
