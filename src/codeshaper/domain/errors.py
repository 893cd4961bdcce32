from __future__ import annotations

"""
Transformation Error Taxonomy.

Every failure an engine can report is terminal for its request. Engines raise
the exceptions below; the protocol adapter converts them into error results
tagged with an ErrorKind.
"""

from enum import Enum


class ErrorKind(str, Enum):
    UNPARSEABLE_JSON = "unparseable_json"
    REJECTED_XML_SECURITY_POLICY = "rejected_xml_security_policy"
    UNHANDLED_TRANSFORM_FAILURE = "unhandled_transform_failure"
    INVALID_REQUEST = "invalid_request"


class TransformError(ValueError):
    """Base class for expected, well-described engine failures."""

    kind: ErrorKind = ErrorKind.UNHANDLED_TRANSFORM_FAILURE


class UnparseableJsonError(TransformError):
    """Raised when JSON input cannot be parsed."""

    kind = ErrorKind.UNPARSEABLE_JSON

    def __init__(self, detail: str):
        super().__init__(f"Invalid JSON: {detail}")
        self.detail = detail


class RejectedMarkupError(TransformError):
    """Raised when markup carries DOCTYPE or ENTITY declarations."""

    kind = ErrorKind.REJECTED_XML_SECURITY_POLICY
