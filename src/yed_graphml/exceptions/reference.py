'''Custom exceptions for invalid entity references.'''
from typing import Optional

from yed_graphml.exceptions.document import ElementId, GraphMLError


class CyclicReferenceError(GraphMLError):
    """Raised when a node's relative chain leads back onto itself"""
    def __init__(self, message: str, element_id: ElementId, hops: int):
        self.hops = hops
        super().__init__(message, element_id)


class TypeMismatchError(GraphMLError, TypeError):
    """Raised when the wrong kind of entity is passed where a node, edge or label is expected"""
    def __init__(self, expected: str, value, element_id: Optional[ElementId] = None):
        self.expected = expected
        super().__init__(
            f"Value must be a {expected} (given value: {value!r})", element_id
        )


class UninitializedReferenceError(GraphMLError):
    """Raised when a node is created without id or an edge without id, source or target"""
    def __init__(self, message: str, element_id: Optional[ElementId] = None, field_name: Optional[str] = None):
        self.field_name = field_name
        super().__init__(message, element_id)
