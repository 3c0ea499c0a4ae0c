"""File access for image embedding.

The embedding engine never touches the filesystem itself. It talks to a
``Vault``: anything with ``resolve_link``, ``stat_size``, ``read_binary``
and ``extension_of`` methods. ``FileSystemVault`` is the implementation
used by the command line; tests substitute an in-memory one.
"""

from pathlib import Path
from typing import Any, Protocol
from urllib.parse import unquote

# Folders inside a vault that never hold linkable files
_SKIPPED_DIRS = {".obsidian", ".git", ".trash", ".copyembed"}


class Vault(Protocol):
    """Capabilities the embedding engine needs from its host."""

    def resolve_link(self, path: str, base_path: str) -> Any | None:
        """Resolve a link written in the note at base_path to a file handle."""
        ...

    def stat_size(self, file: Any) -> int:
        """Return the size of a resolved file in bytes."""
        ...

    def read_binary(self, file: Any) -> bytes:
        """Return the full content of a resolved file."""
        ...

    def extension_of(self, file: Any) -> str:
        """Return the lowercase extension of a resolved file, without dot."""
        ...


def _is_within(path: Path, root: Path) -> bool:
    try:
        path.relative_to(root)
    except ValueError:
        return False
    return True


class FileSystemVault:
    """A vault backed by a directory on disk.

    Links resolve the way Obsidian resolves them: relative to the note's
    folder first, then relative to the vault root, and finally by matching
    the end of any file path in the vault (shortest path wins). Links that
    would leave the vault root never resolve.
    """

    def __init__(self, root: Path):
        self.root = Path(root).resolve()

    def resolve_link(self, path: str, base_path: str) -> Path | None:
        link_variants = [path]
        decoded = unquote(path)
        if decoded != path:
            link_variants.append(decoded)

        note_dir = Path(base_path).resolve().parent

        for link in link_variants:
            link = link.replace("\\", "/")
            if link.startswith("/"):
                candidates = [self.root / link.lstrip("/")]
            else:
                candidates = [note_dir / link, self.root / link]

            for candidate in candidates:
                resolved = candidate.resolve()
                if _is_within(resolved, self.root) and resolved.is_file():
                    return resolved

        for link in link_variants:
            found = self._find_by_suffix(link.replace("\\", "/").lstrip("/"))
            if found is not None:
                return found

        return None

    def _find_by_suffix(self, link: str) -> Path | None:
        """Find the file with the shortest vault path ending in link."""
        if not link or ".." in link.split("/"):
            return None

        wanted = link.lower()
        name = wanted.rsplit("/", 1)[-1]
        matches = []

        for file in self.root.rglob("*"):
            if file.name.lower() != name:
                continue
            rel_path = file.relative_to(self.root)
            if _SKIPPED_DIRS.intersection(rel_path.parts[:-1]):
                continue
            rel = rel_path.as_posix().lower()
            if rel != wanted and not rel.endswith("/" + wanted):
                continue
            # Symlinks may point outside the vault
            resolved = file.resolve()
            if _is_within(resolved, self.root) and resolved.is_file():
                matches.append((rel_path, resolved))

        if not matches:
            return None

        _, best = min(matches, key=lambda m: (len(m[0].parts), m[0].as_posix()))
        return best

    def stat_size(self, file: Path) -> int:
        return file.stat().st_size

    def read_binary(self, file: Path) -> bytes:
        return file.read_bytes()

    def extension_of(self, file: Path) -> str:
        return file.suffix.lower().lstrip(".")
