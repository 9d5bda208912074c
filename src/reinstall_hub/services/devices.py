from __future__ import annotations

from typing import Any

from reinstall_hub.config.settings import ConfigurationMissingError, Settings
from reinstall_hub.data import ResponseValidator, TaggedDevice
from reinstall_hub.services.base import EventHook, RefreshEvent, ServiceErrorEvent
from reinstall_hub.utils import get_logger
from reinstall_hub.wso.client import WorkspaceOneClient
from reinstall_hub.wso.errors import InvalidResponseError
from reinstall_hub.wso.requests import tag_devices_request


logger = get_logger(__name__)


class DeviceService:
    """Looks up the devices tagged as missing the Hub agent."""

    def __init__(self, client: WorkspaceOneClient, settings: Settings) -> None:
        self._client = client
        self._settings = settings

        self.refreshed: EventHook[RefreshEvent] = EventHook("devices.refreshed")
        self.errors: EventHook[ServiceErrorEvent] = EventHook("devices.errors")

    async def list_missing_hub(self, tag_id: str | None = None) -> list[TaggedDevice]:
        """Return the devices carrying the missing-Hub tag."""

        effective_tag = (tag_id or self._settings.tag_id or "").strip()
        if not effective_tag:
            raise ConfigurationMissingError("Missing-Hub tag ID is not configured")

        request = tag_devices_request(effective_tag)
        validator = ResponseValidator("tagged-devices")
        try:
            payload = await self._client.execute_json(request)
            devices = _parse_devices(payload, validator)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Failed to fetch tagged devices", tag_id=effective_tag)
            self.errors.emit(ServiceErrorEvent(tag_id=effective_tag, error=exc))
            raise

        skipped = len(validator.issues())
        if skipped:
            logger.warning(
                "Tagged device listing skipped invalid entries",
                tag_id=effective_tag,
                invalid=skipped,
            )
        if devices:
            logger.info(
                "Fetched tagged devices", tag_id=effective_tag, count=len(devices)
            )
        else:
            logger.info("No devices carry the missing-Hub tag", tag_id=effective_tag)

        self.refreshed.emit(
            RefreshEvent(tag_id=effective_tag, devices=devices, skipped=skipped)
        )
        return devices


def _parse_devices(payload: Any, validator: ResponseValidator) -> list[TaggedDevice]:
    if not isinstance(payload, dict):
        raise InvalidResponseError(
            message="Tag device listing returned an unexpected payload",
        )
    raw_devices = payload.get("Device")
    if raw_devices is None:
        return []
    if not isinstance(raw_devices, list):
        raise InvalidResponseError(
            message="Tag device listing returned a malformed 'Device' field",
        )
    seen: set[int] = set()
    devices: list[TaggedDevice] = []
    for device in validator.parse_many(TaggedDevice, raw_devices):
        if device.id in seen:
            continue
        seen.add(device.id)
        devices.append(device)
    return devices


__all__ = ["DeviceService"]
