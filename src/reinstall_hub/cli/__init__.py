"""Command line entry points."""

from .main import ReinstallHubCli, build_parser, main

__all__ = ["ReinstallHubCli", "build_parser", "main"]
