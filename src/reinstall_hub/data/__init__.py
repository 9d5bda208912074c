"""Domain models and payload validation."""

from .models import TaggedDevice, TaggedDeviceList, WorkspaceOneModel
from .validation import ResponseValidator, ValidationIssue

__all__ = [
    "ResponseValidator",
    "TaggedDevice",
    "TaggedDeviceList",
    "ValidationIssue",
    "WorkspaceOneModel",
]
