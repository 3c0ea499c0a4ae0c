"""Helpers for bundled package data and user paths."""

import importlib.resources
import os


def expand_path(path: str) -> str:
    """Expand a leading ~ in a path; empty paths pass through."""
    return os.path.expanduser(path) if path else path


def read_package_text(package: str, filename: str) -> str | None:
    """Read a text resource bundled in a package.

    Args:
        package: Package name (e.g., "copyembed.defaults")
        filename: Name of the file to read

    Returns:
        File contents, or None if the resource does not exist
    """
    try:
        resource = importlib.resources.files(package).joinpath(filename)
        if resource.is_file():
            return resource.read_text(encoding="utf-8")
    except (TypeError, FileNotFoundError, ModuleNotFoundError):
        pass
    return None
