"""Command line front end for listing missing-Hub devices and reinstalling the Hub."""

from __future__ import annotations

import argparse
import asyncio
import getpass
import json
import sys
from typing import Sequence, TextIO

from keyring.errors import KeyringError

from reinstall_hub.auth import CredentialStore, clear_storage
from reinstall_hub.bootstrap import build_services
from reinstall_hub.config import (
    ConfigurationMissingError,
    Settings,
    SettingsManager,
    detect_first_run,
)
from reinstall_hub.data import TaggedDevice
from reinstall_hub.services import InstallBatchSummary, ServiceRegistry
from reinstall_hub.utils import LoggingOptions, configure_logging, get_logger
from reinstall_hub.utils.errors import describe_exception
from reinstall_hub.utils.formatters import (
    format_install_result,
    format_install_summary,
    format_refresh_status,
    format_tagged_at,
)
from reinstall_hub.wso.errors import WorkspaceOneAPIError


logger = get_logger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_NOT_CONFIGURED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reinstall-hub",
        description="List Macs tagged as missing the Workspace ONE Hub and reinstall it.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    configure = subparsers.add_parser(
        "configure", help="Store tenant settings and API credentials"
    )
    configure.add_argument("--url", required=True, help="Workspace ONE tenant URL")
    configure.add_argument("--app-id", required=True, help="Hub internal app ID")
    configure.add_argument("--tag-id", required=True, help="Missing-Hub tag ID")
    configure.add_argument("--username", required=True, help="API username")
    configure.add_argument(
        "--password", help="API password (prompted when omitted)"
    )
    configure.add_argument(
        "--api-key", help="API key / aw-tenant-code (prompted when omitted)"
    )

    subparsers.add_parser("status", help="Show the configuration state")

    list_parser = subparsers.add_parser("list", help="List devices missing the Hub")
    list_parser.add_argument("--tag-id", help="Override the configured tag ID")
    list_parser.add_argument(
        "--json", action="store_true", help="Print devices as JSON"
    )

    reinstall = subparsers.add_parser(
        "reinstall", help="Reinstall the Hub on one or more devices"
    )
    reinstall.add_argument("device_ids", nargs="*", type=int, metavar="DEVICE_ID")
    reinstall.add_argument(
        "--all",
        action="store_true",
        help="Reinstall on every device currently carrying the missing-Hub tag",
    )

    reset = subparsers.add_parser(
        "reset", help="Remove stored settings and API credentials"
    )
    reset.add_argument("--yes", action="store_true", help="Do not ask for confirmation")
    return parser


class ReinstallHubCli:
    """Executes parsed commands against the configured services."""

    def __init__(
        self,
        *,
        settings_manager: SettingsManager | None = None,
        credential_store: CredentialStore | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self._settings_manager = settings_manager or SettingsManager()
        self._credential_store = credential_store
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr

    @property
    def credential_store(self) -> CredentialStore:
        if self._credential_store is None:
            self._credential_store = CredentialStore()
        return self._credential_store

    def run(self, args: argparse.Namespace) -> int:
        handler = {
            "configure": self._configure,
            "status": self._status,
            "list": self._list,
            "reinstall": self._reinstall,
            "reset": self._reset,
        }[args.command]
        try:
            return handler(args)
        except ConfigurationMissingError as exc:
            self._error(describe_exception(exc).as_text())
            return EXIT_NOT_CONFIGURED
        except KeyringError as exc:
            logger.warning("Keyring unavailable", error=str(exc))
            self._error(describe_exception(exc).as_text())
            return EXIT_NOT_CONFIGURED
        except WorkspaceOneAPIError as exc:
            descriptor = describe_exception(exc)
            self._error(descriptor.as_text())
            if args.verbose and exc.cli_example:
                self._error(f"Reproduce with: {exc.cli_example}")
            return EXIT_FAILURE

    # ---------------------------------------------------------------- Commands

    def _configure(self, args: argparse.Namespace) -> int:
        password = args.password or getpass.getpass("API password: ")
        api_key = args.api_key or getpass.getpass("API key (aw-tenant-code): ")
        settings = self._settings_manager.load()
        settings.tenant_url = args.url.strip()
        settings.app_id = args.app_id.strip()
        settings.tag_id = args.tag_id.strip()
        if not settings.is_configured:
            raise ConfigurationMissingError(
                f"Missing values: {', '.join(settings.missing_fields())}"
            )
        if not (args.username and password and api_key):
            raise ConfigurationMissingError("Username, password and API key are required")
        self._settings_manager.save(settings)
        self.credential_store.save(args.username, password, api_key)
        self._print(f"Configuration saved to {self._settings_manager.env_file}")
        return EXIT_OK

    def _status(self, args: argparse.Namespace) -> int:
        status = detect_first_run(
            settings_manager=self._settings_manager,
            credential_store=self.credential_store,
        )
        settings = status.settings
        self._print(f"Tenant URL:   {settings.tenant_url or '-'}")
        self._print(f"Hub app ID:   {settings.app_id or '-'}")
        self._print(f"Tag ID:       {settings.tag_id or '-'}")
        self._print(
            f"Credentials:  {'stored' if not status.missing_credentials else 'missing'}"
        )
        if status.is_configured:
            return EXIT_OK
        self._print("Run 'reinstall-hub configure' to finish the setup.")
        return EXIT_NOT_CONFIGURED

    def _list(self, args: argparse.Namespace) -> int:
        devices = asyncio.run(self._fetch_devices(args.tag_id))
        if args.json:
            payload = [device.to_api() for device in devices]
            self._print(json.dumps(payload, indent=2))
            return EXIT_OK
        for device in devices:
            tagged = format_tagged_at(device.tagged_at, device.date_tagged)
            self._print(f"{device.id:>8}  {device.display_name}  {tagged}".rstrip())
        self._print(format_refresh_status(devices))
        return EXIT_OK

    def _reinstall(self, args: argparse.Namespace) -> int:
        summary = asyncio.run(self._reinstall_devices(args.device_ids, args.all))
        if summary is None:
            self._print(format_refresh_status([]))
            return EXIT_OK
        for result in summary.results:
            self._print(format_install_result(result))
            if result.error is not None and args.verbose:
                self._error(f"  {describe_exception(result.error).as_text()}")
        if len(summary.results) > 1:
            self._print(format_install_summary(summary))
        return EXIT_OK if summary.all_succeeded else EXIT_FAILURE

    def _reset(self, args: argparse.Namespace) -> int:
        if not args.yes:
            answer = input("Remove stored settings and API credentials? [y/N] ")
            if answer.strip().lower() not in {"y", "yes"}:
                self._print("Aborted.")
                return EXIT_FAILURE
        clear_storage(self._settings_manager, self.credential_store)
        self._print("Settings and credentials removed.")
        return EXIT_OK

    # ----------------------------------------------------------------- Helpers

    def _services(self) -> tuple[Settings, ServiceRegistry]:
        status = detect_first_run(
            settings_manager=self._settings_manager,
            credential_store=self.credential_store,
        )
        if not status.is_configured:
            raise ConfigurationMissingError(
                "Tenant settings or API credentials are missing"
            )
        services = build_services(status.settings, self.credential_store)
        if services.devices is None or services.installs is None:
            raise ConfigurationMissingError("Workspace ONE services are not available")
        return status.settings, services

    async def _fetch_devices(self, tag_id: str | None) -> list[TaggedDevice]:
        _, services = self._services()
        try:
            return await services.devices.list_missing_hub(tag_id)
        finally:
            await services.close()

    async def _reinstall_devices(
        self, device_ids: Sequence[int], all_devices: bool
    ) -> InstallBatchSummary | None:
        _, services = self._services()
        try:
            targets = list(device_ids)
            if all_devices:
                devices = await services.devices.list_missing_hub()
                targets = [device.id for device in devices]
                if not targets:
                    return None
            return await services.installs.reinstall_many(targets)
        finally:
            await services.close()

    def _print(self, message: str) -> None:
        print(message, file=self._stdout)

    def _error(self, message: str) -> None:
        print(message, file=self._stderr)


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "reinstall" and bool(args.device_ids) == bool(args.all):
        parser.error("pass either device IDs or --all")
    configure_logging(
        LoggingOptions(
            level="DEBUG" if args.verbose else "WARNING",
            debug=args.verbose,
        )
    )
    return ReinstallHubCli().run(args)


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
