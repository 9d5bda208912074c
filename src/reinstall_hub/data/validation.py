from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, List, Type, TypeVar

from pydantic import ValidationError

from reinstall_hub.data.models import WorkspaceOneModel
from reinstall_hub.utils import get_logger


logger = get_logger(__name__)

ModelT = TypeVar("ModelT", bound=WorkspaceOneModel)


@dataclass(slots=True)
class ValidationIssue:
    """Represents a schema validation failure for an API payload."""

    resource: str
    identifier: str | None
    message: str
    fields: tuple[str, ...] = field(default_factory=tuple)


class ResponseValidator:
    """Validate Workspace ONE payloads, skipping entries that do not fit the model."""

    def __init__(
        self,
        resource: str,
        *,
        identifier_key: str = "DeviceId",
        issue_callback: Callable[[ValidationIssue], None] | None = None,
    ) -> None:
        self._resource = resource
        self._identifier_key = identifier_key
        self._issue_callback = issue_callback
        self._issues: list[ValidationIssue] = []

    def parse(
        self,
        model: Type[ModelT],
        payload: Any,
    ) -> ModelT | None:
        if not isinstance(payload, dict):
            self._record_issue(
                ValidationIssue(
                    resource=self._resource,
                    identifier=None,
                    message=f"Expected an object, got {type(payload).__name__}",
                ),
                errors=None,
            )
            return None
        try:
            return model.from_api(payload)
        except ValidationError as exc:
            raw_id = payload.get(self._identifier_key)
            fields = tuple(
                ".".join(str(segment) for segment in error.get("loc", ()))
                for error in exc.errors()
            )
            self._record_issue(
                ValidationIssue(
                    resource=self._resource,
                    identifier=str(raw_id) if raw_id is not None else None,
                    message="Payload failed schema validation",
                    fields=fields,
                ),
                errors=exc.errors(include_input=False),
            )
            return None

    def parse_many(
        self,
        model: Type[ModelT],
        payloads: Iterable[Any],
    ) -> list[ModelT]:
        items: list[ModelT] = []
        for payload in payloads:
            item = self.parse(model, payload)
            if item is not None:
                items.append(item)
        return items

    def issues(self) -> list[ValidationIssue]:
        return list(self._issues)

    def reset(self) -> None:
        self._issues.clear()

    def _record_issue(self, issue: ValidationIssue, *, errors: object) -> None:
        self._issues.append(issue)
        logger.warning(
            "Payload validation failed",
            resource=self._resource,
            identifier=issue.identifier,
            fields=", ".join(issue.fields) if issue.fields else "unknown",
            errors=errors,
        )
        if self._issue_callback is not None:
            try:
                self._issue_callback(issue)
            except Exception:  # pragma: no cover - callbacks should not break validation
                logger.exception("Validation issue callback raised an exception")


__all__: List[str] = ["ResponseValidator", "ValidationIssue"]
