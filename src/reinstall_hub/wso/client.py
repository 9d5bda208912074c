from __future__ import annotations

import json
import shlex
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Tuple

import httpx
from httpx import Auth
from httpx._client import USE_CLIENT_DEFAULT, UseClientDefault

from reinstall_hub.auth.types import ApiCredentials
from reinstall_hub.config.settings import ConfigurationMissingError, normalise_tenant_url
from reinstall_hub.utils import get_logger
from reinstall_hub.utils.sanitize import redact_headers, sanitize_response_body
from reinstall_hub.wso.errors import (
    AuthenticationError,
    InvalidResponseError,
    PermissionError,
    WorkspaceOneAPIError,
    WorkspaceOneErrorCategory,
)
from reinstall_hub.wso.requests import WorkspaceOneRequest


logger = get_logger(__name__)


CredentialsProvider = Callable[[], ApiCredentials | None]

TENANT_CODE_HEADER = "aw-tenant-code"
JSON_CONTENT_TYPE = "application/json"


@dataclass(slots=True)
class RequestTelemetryEvent:
    method: str
    url: str
    status_code: int | None
    duration_ms: float
    category: WorkspaceOneErrorCategory | None
    success: bool


AuthOption = (
    Tuple[str | bytes, str | bytes]
    | Callable[[httpx.Request], httpx.Request]
    | Auth
    | UseClientDefault
    | None
)


class TelemetryAsyncClient(httpx.AsyncClient):
    """AsyncClient that maps failures to Workspace ONE errors and reports timing."""

    def __init__(
        self,
        *args: Any,
        telemetry_callback: Callable[[RequestTelemetryEvent], None] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self._telemetry_callback = telemetry_callback

    async def send(
        self,
        request: httpx.Request,
        *,
        stream: bool = False,
        auth: AuthOption = USE_CLIENT_DEFAULT,
        follow_redirects: bool | UseClientDefault = USE_CLIENT_DEFAULT,
        **kwargs: object,
    ) -> httpx.Response:
        start = time.perf_counter()
        try:
            response = await super().send(
                request,
                stream=stream,
                auth=auth,
                follow_redirects=follow_redirects,
                **kwargs,
            )
        except httpx.TimeoutException as exc:
            self._publish_telemetry(
                request,
                duration=time.perf_counter() - start,
                status_code=None,
                success=False,
                category=WorkspaceOneErrorCategory.NETWORK,
            )
            raise WorkspaceOneAPIError(
                message="Timed out waiting for the Workspace ONE API",
                category=WorkspaceOneErrorCategory.NETWORK,
                inner_error=exc,
            ) from exc
        except httpx.RequestError as exc:
            self._publish_telemetry(
                request,
                duration=time.perf_counter() - start,
                status_code=None,
                success=False,
                category=WorkspaceOneErrorCategory.NETWORK,
            )
            raise WorkspaceOneAPIError(
                message=f"Network error communicating with Workspace ONE: {exc}",
                category=WorkspaceOneErrorCategory.NETWORK,
                inner_error=exc,
            ) from exc

        if response.status_code >= 400:
            if stream:
                await response.aread()
            error = _map_response_to_error(response)
            self._publish_telemetry(
                request,
                duration=time.perf_counter() - start,
                status_code=response.status_code,
                success=False,
                category=error.category,
            )
            raise error

        self._publish_telemetry(
            request,
            duration=time.perf_counter() - start,
            status_code=response.status_code,
            success=True,
            category=None,
        )
        return response

    def _publish_telemetry(
        self,
        request: httpx.Request,
        *,
        duration: float,
        status_code: int | None,
        success: bool,
        category: WorkspaceOneErrorCategory | None,
    ) -> None:
        if not self._telemetry_callback:
            return
        event = RequestTelemetryEvent(
            method=request.method,
            url=str(request.url),
            status_code=status_code,
            duration_ms=duration * 1000,
            category=category,
            success=success,
        )
        try:
            self._telemetry_callback(event)
        except Exception:  # pragma: no cover - telemetry shouldn't break requests
            logger.warning("Telemetry callback raised an exception", exc_info=True)


def _map_response_to_error(response: httpx.Response) -> WorkspaceOneAPIError:
    status = response.status_code
    body: object = None
    try:
        body = response.json()
    except ValueError:
        body = None

    message: str | None = None
    error_code: int | None = None
    activity_id: str | None = None
    if isinstance(body, dict):
        raw_message = body.get("message") or body.get("Message")
        if isinstance(raw_message, str) and raw_message.strip():
            message = raw_message.strip()
        raw_code = body.get("errorCode", body.get("ErrorCode"))
        if isinstance(raw_code, int):
            error_code = raw_code
        elif isinstance(raw_code, str) and raw_code.isdigit():
            error_code = int(raw_code)
        raw_activity = body.get("activityId", body.get("ActivityId"))
        if raw_activity:
            activity_id = str(raw_activity)

    if message is None:
        text = sanitize_response_body(response.text, limit=200) if response.text else ""
        message = text or f"Workspace ONE request failed with status {status}"

    extra = {"error_code": error_code, "activity_id": activity_id}
    if status == 401:
        return AuthenticationError(message=message, **extra)
    if status == 403:
        return PermissionError(message=message, **extra)

    category = WorkspaceOneErrorCategory.UNKNOWN
    if status == 404:
        category = WorkspaceOneErrorCategory.NOT_FOUND
    elif status in {400, 422}:
        category = WorkspaceOneErrorCategory.VALIDATION

    return WorkspaceOneAPIError(
        message=message,
        category=category,
        status_code=status,
        error_code=error_code,
        activity_id=activity_id,
    )


@dataclass(slots=True)
class WorkspaceOneClientConfig:
    base_url: str
    timeout: float = 30.0
    user_agent: str = "ReinstallHub-Python"
    enable_telemetry: bool = True
    telemetry_callback: Callable[[RequestTelemetryEvent], None] | None = None


class WorkspaceOneClient:
    """Thin async client for the Workspace ONE UEM REST API."""

    def __init__(
        self,
        config: WorkspaceOneClientConfig,
        credentials_provider: CredentialsProvider,
    ) -> None:
        base_url = normalise_tenant_url(config.base_url)
        if not base_url:
            raise ConfigurationMissingError("Workspace ONE tenant URL is not configured")
        self._config = config
        self._base_url = base_url
        self._credentials_provider = credentials_provider
        self._telemetry_callback = (
            config.telemetry_callback if config.enable_telemetry else None
        )
        self._http_client: TelemetryAsyncClient | None = None

    @property
    def base_url(self) -> str:
        return self._base_url

    def absolute_url(self, path: str) -> str:
        if path.startswith("http://") or path.startswith("https://"):
            return path
        if not path.startswith("/"):
            path = "/" + path
        return f"{self._base_url}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> httpx.Response:
        client = self._get_http_client()
        url = self.absolute_url(path)
        logger.debug(
            "Workspace ONE request",
            method=method.upper(),
            url=url,
            headers=redact_headers(headers),
        )
        try:
            response = await client.request(
                method,
                url,
                params=params,
                json=json_body,
                headers=headers,
            )
        except WorkspaceOneAPIError as exc:
            self._enrich_error(
                exc,
                method=method,
                url=url,
                params=params,
                json_body=json_body,
            )
            raise
        return response

    async def request_json(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json_body: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        response = await self.request(
            method,
            path,
            params=params,
            json_body=json_body,
            headers=headers,
        )
        if not response.content.strip():
            return {}
        try:
            return response.json()
        except ValueError as exc:
            logger.warning(
                "Workspace ONE returned a body that is not JSON",
                url=str(response.request.url),
                status_code=response.status_code,
                body=sanitize_response_body(response.text),
            )
            error = InvalidResponseError(
                message="Workspace ONE returned a response that is not valid JSON",
                status_code=response.status_code,
                inner_error=exc,
            )
            self._enrich_error(
                error,
                method=method,
                url=self.absolute_url(path),
                params=params,
                json_body=json_body,
            )
            raise error from exc

    async def execute(self, request: WorkspaceOneRequest) -> httpx.Response:
        return await self.request(
            request.method,
            request.path,
            params=request.params,
            json_body=request.body,
            headers=request.headers,
        )

    async def execute_json(self, request: WorkspaceOneRequest) -> Any:
        return await self.request_json(
            request.method,
            request.path,
            params=request.params,
            json_body=request.body,
            headers=request.headers,
        )

    async def close(self) -> None:
        if self._http_client is not None:
            await self._http_client.aclose()
            self._http_client = None

    async def __aenter__(self) -> "WorkspaceOneClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ------------------------------------------------------------- Internals

    def _enrich_error(
        self,
        error: WorkspaceOneAPIError,
        *,
        method: str,
        url: str,
        params: dict[str, Any] | None,
        json_body: Any | None,
    ) -> None:
        method_upper = method.upper()
        if params:
            query = str(httpx.QueryParams(params))
            if query:
                separator = "&" if "?" in url else "?"
                url = f"{url}{separator}{query}"

        error.request_method = method_upper
        error.request_url = url
        if not error.cli_example:
            error.cli_example = self._build_cli_example(
                method=method_upper,
                url=url,
                json_body=json_body,
            )

    def _build_cli_example(
        self,
        *,
        method: str,
        url: str,
        json_body: Any | None,
    ) -> str:
        tokens: list[str] = ["curl", "-X", method.upper(), url]
        for key, value in redact_headers(self._default_headers(redacted=True)).items():
            tokens.extend(["-H", f"{key}: {value}"])
        body = self._serialise_body(json_body)
        if body is not None:
            tokens.extend(["--data", body])
        return shlex.join(tokens)

    @staticmethod
    def _serialise_body(json_body: Any | None) -> str | None:
        if json_body is None:
            return None
        try:
            body_text = json.dumps(json_body, ensure_ascii=True, separators=(",", ":"))
        except TypeError:
            body_text = repr(json_body)
        return WorkspaceOneClient._truncate_cli_value(body_text)

    @staticmethod
    def _truncate_cli_value(value: str, limit: int = 800) -> str:
        compact = value.replace("\n", " ").strip()
        if len(compact) <= limit:
            return compact
        return f"{compact[: limit - 3]}..."

    def _default_headers(self, *, redacted: bool = False) -> dict[str, str]:
        headers = {
            "Accept": JSON_CONTENT_TYPE,
            "Content-Type": JSON_CONTENT_TYPE,
        }
        if redacted:
            headers[TENANT_CODE_HEADER] = ""
            headers["Authorization"] = ""
        return headers

    def ensure_credentials(self) -> ApiCredentials:
        """Read the API credentials, raising when none are stored."""
        credentials = self._credentials_provider()
        if credentials is None:
            raise ConfigurationMissingError(
                "Workspace ONE API credentials are not configured"
            )
        return credentials

    def _apply_credentials(self, request: httpx.Request) -> httpx.Request:
        credentials = self.ensure_credentials()
        request.headers[TENANT_CODE_HEADER] = credentials.api_key
        request.headers["Authorization"] = credentials.basic_authorization()
        return request

    def _get_http_client(self) -> TelemetryAsyncClient:
        if self._http_client is None:
            callback = self._telemetry_callback
            if callback is None and self._config.enable_telemetry:
                callback = self._default_telemetry_callback

            headers = self._default_headers()
            headers["User-Agent"] = self._config.user_agent
            self._http_client = TelemetryAsyncClient(
                headers=headers,
                auth=self._apply_credentials,
                telemetry_callback=callback,
                timeout=httpx.Timeout(self._config.timeout, connect=10.0),
            )
        return self._http_client

    def _default_telemetry_callback(self, event: RequestTelemetryEvent) -> None:
        logger.debug(
            "Workspace ONE response",
            method=event.method,
            url=event.url,
            status_code=event.status_code,
            duration_ms=round(event.duration_ms, 2),
            success=event.success,
            category=event.category.value if event.category else None,
        )


__all__ = [
    "CredentialsProvider",
    "RequestTelemetryEvent",
    "TENANT_CODE_HEADER",
    "WorkspaceOneClient",
    "WorkspaceOneClientConfig",
]
