"""Event plumbing shared by the device and install services."""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Generic, TypeVar

from reinstall_hub.data import TaggedDevice
from reinstall_hub.utils import get_logger


logger = get_logger(__name__)

EventT = TypeVar("EventT")


class EventHook(Generic[EventT]):
    """Delivers service events to the UI and CLI listeners.

    A listener that raises is logged and the remaining listeners still run.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self._listeners: list[Callable[[EventT], None]] = []

    def subscribe(self, listener: Callable[[EventT], None]) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        self._listeners.append(listener)
        return partial(self._discard, listener)

    def emit(self, event: EventT) -> None:
        for listener in tuple(self._listeners):
            try:
                listener(event)
            except Exception:  # noqa: BLE001
                logger.exception("Service listener failed", hook=self.name)

    def _discard(self, listener: Callable[[EventT], None]) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)


@dataclass(slots=True)
class RefreshEvent:
    """Devices returned by a successful missing-Hub listing."""

    tag_id: str
    devices: list[TaggedDevice] = field(default_factory=list)
    skipped: int = 0


@dataclass(slots=True)
class ServiceErrorEvent:
    tag_id: str
    error: Exception


__all__ = ["EventHook", "RefreshEvent", "ServiceErrorEvent"]
