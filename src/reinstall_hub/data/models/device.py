from __future__ import annotations

from datetime import datetime

from pydantic import Field

from .common import WorkspaceOneModel


class TaggedDevice(WorkspaceOneModel):
    """A device returned by the tag device search."""

    id: int = Field(alias="DeviceId")
    friendly_name: str = Field(alias="FriendlyName")
    date_tagged: str = Field(default="", alias="DateTagged")
    device_uuid: str = Field(default="", alias="DeviceUuid")

    @property
    def tagged_at(self) -> datetime | None:
        if not self.date_tagged:
            return None
        try:
            return datetime.fromisoformat(self.date_tagged)
        except ValueError:
            return None

    @property
    def display_name(self) -> str:
        return self.friendly_name or f"Device {self.id}"


class TaggedDeviceList(WorkspaceOneModel):
    devices: list[TaggedDevice] = Field(default_factory=list, alias="Device")
