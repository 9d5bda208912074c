"""Domain models representing Workspace ONE resources."""

from .common import WorkspaceOneModel
from .device import TaggedDevice, TaggedDeviceList

__all__ = ["TaggedDevice", "TaggedDeviceList", "WorkspaceOneModel"]
