from __future__ import annotations

from reinstall_hub.auth import CredentialStore
from reinstall_hub.config import Settings
from reinstall_hub.services import DeviceService, HubInstallService, ServiceRegistry
from reinstall_hub.utils import get_logger
from reinstall_hub.wso.client import WorkspaceOneClient, WorkspaceOneClientConfig


logger = get_logger(__name__)


def build_services(
    settings: Settings,
    credential_store: CredentialStore,
) -> ServiceRegistry:
    """Wire the Workspace ONE client and domain services.

    Returns an empty registry when the tenant configuration or the stored
    credentials are incomplete; callers show the configuration screen then.
    """

    if not settings.is_configured:
        logger.info(
            "Configuration incomplete; services not initialised",
            missing=settings.missing_fields(),
        )
        return ServiceRegistry()
    if not credential_store.has_credentials():
        logger.info("API credentials missing; services not initialised")
        return ServiceRegistry()

    client = WorkspaceOneClient(
        WorkspaceOneClientConfig(
            base_url=settings.base_url(),
            timeout=settings.request_timeout,
        ),
        credential_store.load,
    )
    devices = DeviceService(client, settings)
    installs = HubInstallService(client, settings)

    logger.info(
        "Services initialised",
        tenant_url=client.base_url,
        tag_id=settings.tag_id,
        app_id=settings.app_id,
    )
    return ServiceRegistry(client=client, devices=devices, installs=installs)


__all__ = ["build_services"]
