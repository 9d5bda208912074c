from __future__ import annotations

from datetime import datetime

from reinstall_hub.data import TaggedDevice, TaggedDeviceList

from tests.factories import device_payload


def test_tagged_device_parses_workspace_one_payload() -> None:
    device = TaggedDevice.from_api(device_payload(1001, friendly_name="Lab Mac"))

    assert device.id == 1001
    assert device.friendly_name == "Lab Mac"
    assert device.display_name == "Lab Mac"
    assert device.tagged_at == datetime(2024, 11, 11, 9, 30)


def test_tagged_device_coerces_numeric_strings_and_ignores_unknown_fields() -> None:
    device = TaggedDevice.from_api(
        {"DeviceId": "77", "FriendlyName": "Kiosk", "Platform": "AppleOsX"}
    )

    assert device.id == 77
    assert device.date_tagged == ""
    assert device.tagged_at is None


def test_unparseable_tagged_date_yields_none() -> None:
    device = TaggedDevice.from_api(device_payload(5, DateTagged="last tuesday"))
    assert device.tagged_at is None


def test_display_name_falls_back_to_device_id() -> None:
    device = TaggedDevice.from_api({"DeviceId": 9, "FriendlyName": ""})
    assert device.display_name == "Device 9"


def test_devices_compare_and_hash_by_value() -> None:
    first = TaggedDevice.from_api(device_payload(1))
    second = TaggedDevice.from_api(device_payload(1))

    assert first == second
    assert len({first, second}) == 1


def test_to_api_round_trips_aliases() -> None:
    payload = device_payload(3)
    assert TaggedDevice.from_api(payload).to_api() == payload


def test_device_list_defaults_to_empty() -> None:
    assert TaggedDeviceList.from_api({}).devices == []

    listing = TaggedDeviceList.from_api({"Device": [device_payload(1), device_payload(2)]})
    assert [device.id for device in listing.devices] == [1, 2]
