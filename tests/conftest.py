"""Shared fixtures for copyembed tests."""

import posixpath

import pytest


class MemoryVault:
    """In-memory vault: file handles are vault-relative path strings."""

    def __init__(self, files, sizes=None, unreadable=(), resolve_error=None):
        self.files = dict(files)
        self.sizes = dict(sizes or {})
        self.unreadable = set(unreadable)
        self.resolve_error = resolve_error
        self.resolved: list[str] = []
        self.reads: list[str] = []

    def resolve_link(self, path, base_path):
        if self.resolve_error is not None:
            raise self.resolve_error
        self.resolved.append(path)
        note_dir = posixpath.dirname(base_path)
        for candidate in (posixpath.normpath(posixpath.join(note_dir, path)), path):
            if candidate in self.files:
                return candidate
        return None

    def stat_size(self, file):
        if file in self.sizes:
            return self.sizes[file]
        return len(self.files[file])

    def read_binary(self, file):
        self.reads.append(file)
        if file in self.unreadable:
            raise PermissionError(13, "Permission denied")
        return self.files[file]

    def extension_of(self, file):
        return file.rpartition(".")[2].lower()


@pytest.fixture
def memory_vault():
    """Factory for in-memory vaults."""
    return MemoryVault


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers bound to streams from earlier tests."""
    import logging

    from copyembed import logging as copyembed_logging

    copyembed_logging._logger = None
    logging.getLogger(copyembed_logging.LOGGER_NAME).handlers.clear()
    yield
    copyembed_logging._logger = None
    logging.getLogger(copyembed_logging.LOGGER_NAME).handlers.clear()
