"""Configuration loading and management for copyembed."""

import tomllib
from dataclasses import dataclass, field, fields
from difflib import SequenceMatcher
from pathlib import Path
from typing import TypeVar

from .logging import warning
from .resources import expand_path
from .scanner import ALLOWED_EXTENSIONS

T = TypeVar("T")

CONFIG_DIR = ".copyembed"
CONFIG_FILE = "config.toml"
OBSIDIAN_DIR = ".obsidian"

MAX_FILE_SIZE = 10 * 1024 * 1024


def _find_similar(key: str, valid_keys: set[str], threshold: float = 0.6) -> str | None:
    """Return the valid key most similar to key, if similar enough."""
    best_match = None
    best_ratio = 0.0

    for valid in valid_keys:
        ratio = SequenceMatcher(None, key.lower(), valid.lower()).ratio()
        if ratio > best_ratio:
            best_ratio = ratio
            best_match = valid

    return best_match if best_ratio >= threshold else None


def _warn_unknown_keys(
    data: dict, valid_keys: set[str], section: str, config_path: Path | None = None
) -> None:
    """Warn about keys in a config section that nothing reads."""
    for key in sorted(set(data.keys()) - valid_keys):
        location = f" in {config_path}" if config_path else ""
        msg = f"Unknown config key '{key}' in [{section}]{location}"

        similar = _find_similar(key, valid_keys)
        if similar:
            msg += f". Did you mean '{similar}'?"

        warning(msg)


def _load_dataclass(
    cls: type[T],
    data: dict,
    defaults: T,
    transforms: dict[str, callable] | None = None,
    section: str = "",
    config_path: Path | None = None,
) -> T:
    """Build a dataclass from a config section, falling back to defaults.

    Args:
        cls: The dataclass type to create
        data: Dict of values from the config file
        defaults: Instance holding the default values
        transforms: Optional dict mapping field names to transform functions
        section: Section name for validation warnings
        config_path: Path to config file for validation warnings
    """
    transforms = transforms or {}
    kwargs = {}
    _warn_unknown_keys(data, {f.name for f in fields(cls)}, section, config_path)

    for f in fields(cls):
        value = data.get(f.name, getattr(defaults, f.name))
        if f.name in transforms:
            value = transforms[f.name](value)
        kwargs[f.name] = value
    return cls(**kwargs)


def _normalize_extensions(values) -> tuple[str, ...]:
    """Lowercase extensions, drop dots, and keep only embeddable ones."""
    if isinstance(values, str):
        values = [values]
    result = []
    for value in values:
        ext = str(value).lower().lstrip(".")
        if ext not in ALLOWED_EXTENSIONS:
            warning(f"Ignoring unsupported image extension '{value}'")
            continue
        if ext not in result:
            result.append(ext)
    return tuple(result)


@dataclass(frozen=True)
class EmbedConfig:
    """Limits applied to every embedded image."""

    max_file_size: int = MAX_FILE_SIZE
    allowed_extensions: tuple[str, ...] = ALLOWED_EXTENSIONS
    alt_text_max_length: int = 200


@dataclass
class VaultConfig:
    """Where links are resolved from."""

    root: str = ""  # Empty: directory holding .copyembed, or nearest .obsidian


@dataclass
class ClipboardConfig:
    """Clipboard output settings."""

    min_interval_ms: int = 500


@dataclass
class Config:
    """Main configuration container."""

    embed: EmbedConfig = field(default_factory=EmbedConfig)
    vault: VaultConfig = field(default_factory=VaultConfig)
    clipboard: ClipboardConfig = field(default_factory=ClipboardConfig)

    config_path: Path | None = None

    @classmethod
    def load(cls, config_path: Path) -> "Config":
        """Load configuration from a TOML file.

        A missing file yields the defaults.

        Raises:
            tomllib.TOMLDecodeError: If the file is not valid TOML
        """
        config = cls()
        config.config_path = config_path

        if not config_path.exists():
            return config

        with open(config_path, "rb") as f:
            data = tomllib.load(f)

        _warn_unknown_keys(data, {"embed", "vault", "clipboard"}, "top-level", config_path)

        if "embed" in data:
            config.embed = _load_dataclass(
                EmbedConfig,
                data["embed"],
                config.embed,
                transforms={"allowed_extensions": _normalize_extensions},
                section="embed",
                config_path=config_path,
            )

        if "vault" in data:
            config.vault = _load_dataclass(
                VaultConfig,
                data["vault"],
                config.vault,
                transforms={"root": expand_path},
                section="vault",
                config_path=config_path,
            )

        if "clipboard" in data:
            config.clipboard = _load_dataclass(
                ClipboardConfig,
                data["clipboard"],
                config.clipboard,
                section="clipboard",
                config_path=config_path,
            )

        return config

    @classmethod
    def find_and_load(cls, start_path: Path | None = None) -> "Config":
        """Find and load .copyembed/config.toml above start_path.

        Unlike a build tool, copyembed works without any config file, so
        defaults are returned when none is found.
        """
        if start_path is None:
            start_path = Path.cwd()

        config_path = cls.find_config(start_path)
        if config_path is None:
            return cls()
        return cls.load(config_path)

    @staticmethod
    def find_config(start_path: Path) -> Path | None:
        """Find .copyembed/config.toml in start_path or any parent."""
        current = start_path.resolve()
        if current.is_file():
            current = current.parent

        while True:
            config_path = current / CONFIG_DIR / CONFIG_FILE
            if config_path.exists():
                return config_path

            parent = current.parent
            if parent == current:
                return None
            current = parent

    def get_vault_root(self, note_path: Path) -> Path:
        """Get the directory links in note_path are resolved against.

        Order: configured root, the directory holding .copyembed, the
        nearest ancestor containing .obsidian, the note's own folder.
        """
        if self.vault.root:
            root = Path(self.vault.root)
            if not root.is_absolute() and self.config_path is not None:
                root = self.config_path.parent.parent / root
            return root.resolve()

        if self.config_path is not None:
            return self.config_path.parent.parent.resolve()

        note_dir = note_path.resolve().parent
        for directory in (note_dir, *note_dir.parents):
            if (directory / OBSIDIAN_DIR).is_dir():
                return directory
        return note_dir

    @property
    def min_interval(self) -> float:
        """Minimum seconds between two conversions."""
        return self.clipboard.min_interval_ms / 1000
