"""Replace image references in a note with inline base64 data URIs."""

import base64
from dataclasses import dataclass, replace
from pathlib import Path

from .config import Config, EmbedConfig
from .errors import (
    ConversionError,
    DisallowedExtension,
    EmbedError,
    FileTooLarge,
    ReadFailure,
    ReferenceUnresolved,
)
from .logging import debug, warning
from .scanner import ImageReference, scan_markdown_references, scan_wiki_references
from .vault import FileSystemVault, Vault

MIME_TYPES = {
    "png": "image/png",
    "jpg": "image/jpeg",
    "jpeg": "image/jpeg",
    "gif": "image/gif",
    "webp": "image/webp",
    "bmp": "image/bmp",
}
DEFAULT_MIME_TYPE = "image/png"

# Characters that could break out of ![...] or inject markup
_UNSAFE_ALT_CHARS = str.maketrans("", "", "<>\"'")

# Referenced paths are truncated to this length in log messages
_LOG_PATH_LENGTH = 50


@dataclass(frozen=True)
class EmbedOutcome:
    """What happened to a single reference."""

    reference: ImageReference
    data_uri: str | None = None
    error: EmbedError | None = None

    @property
    def ok(self) -> bool:
        return self.data_uri is not None

    @property
    def reason(self) -> str:
        return "embedded" if self.ok else self.error.reason


@dataclass(frozen=True)
class ConversionResult:
    """Rewritten text plus the per-reference outcomes."""

    text: str
    skipped_count: int
    outcomes: tuple[EmbedOutcome, ...] = ()

    @property
    def embedded_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def skipped(self) -> list[EmbedOutcome]:
        return [outcome for outcome in self.outcomes if not outcome.ok]


def get_mime_type(ext: str) -> str:
    """Get the MIME type for an image extension."""
    return MIME_TYPES.get(ext.lower(), DEFAULT_MIME_TYPE)


def build_data_uri(data: bytes, ext: str) -> str:
    """Encode image bytes as a ``data:<mime>;base64,<payload>`` URI."""
    payload = base64.b64encode(data).decode("ascii")
    return f"data:{get_mime_type(ext)};base64,{payload}"


def sanitize_alt_text(text: str, max_length: int = 200) -> str:
    """Strip characters that could break the image syntax and truncate."""
    return text.translate(_UNSAFE_ALT_CHARS)[:max_length]


def _short(path: str) -> str:
    return path[:_LOG_PATH_LENGTH]


def encode_reference(
    reference: ImageReference,
    document_path: str,
    vault: Vault,
    config: EmbedConfig,
) -> str:
    """Resolve, validate and encode one reference.

    Returns:
        The data URI for the referenced image.

    Raises:
        ReferenceUnresolved: No file matches the reference
        DisallowedExtension: The file is not an allowed image type
        FileTooLarge: The file exceeds config.max_file_size
        ReadFailure: Stat-ing or reading the file failed
    """
    file = vault.resolve_link(reference.path, document_path)
    if file is None:
        raise ReferenceUnresolved(f"Image not found: {_short(reference.path)}")

    ext = vault.extension_of(file).lower()
    if ext not in config.allowed_extensions:
        raise DisallowedExtension(f"Unsupported file type: {ext}")

    try:
        size = vault.stat_size(file)
    except OSError as e:
        raise ReadFailure(f"Failed to stat image: {e.strerror or e}") from e

    if size > config.max_file_size:
        size_mb = round(size / 1024 / 1024)
        raise FileTooLarge(f"File too large ({size_mb}MB): {_short(reference.path)}")

    try:
        data = vault.read_binary(file)
    except OSError as e:
        raise ReadFailure(f"Failed to read image: {e.strerror or e}") from e

    return build_data_uri(data, ext)


def _embed_all(
    references: list[ImageReference],
    document_path: str,
    vault: Vault,
    config: EmbedConfig,
) -> list[EmbedOutcome]:
    outcomes = []
    for reference in references:
        try:
            data_uri = encode_reference(reference, document_path, vault, config)
        except EmbedError as e:
            warning(str(e))
            outcomes.append(EmbedOutcome(reference, error=e))
        else:
            debug(f"Embedded {_short(reference.path)}")
            outcomes.append(EmbedOutcome(reference, data_uri=data_uri))
    return outcomes


def _scan_markdown_between(
    text: str, spans: list[tuple[int, int]]
) -> list[ImageReference]:
    """Scan for Markdown images in the text left between embedded spans.

    No Markdown image can cross an inserted data URI, so scanning each gap
    separately finds what a scan of the substituted text would find.
    """
    references = []
    pos = 0
    for start, end in sorted(spans) + [(len(text), len(text))]:
        for reference in scan_markdown_references(text[pos:start]):
            references.append(
                replace(reference, start=reference.start + pos, end=reference.end + pos)
            )
        pos = end
    return references


def _replacement(outcome: EmbedOutcome, config: EmbedConfig) -> str:
    alt = sanitize_alt_text(outcome.reference.label, config.alt_text_max_length)
    return f"![{alt}]({outcome.data_uri})"


def _splice(text: str, outcomes: list[EmbedOutcome], config: EmbedConfig) -> str:
    """Build the rewritten text from non-overlapping successful outcomes."""
    parts = []
    pos = 0
    for outcome in sorted(
        (o for o in outcomes if o.ok), key=lambda o: o.reference.start
    ):
        parts.append(text[pos : outcome.reference.start])
        parts.append(_replacement(outcome, config))
        pos = outcome.reference.end
    parts.append(text[pos:])
    return "".join(parts)


def convert(
    text: str,
    document_path: str,
    vault: Vault,
    config: EmbedConfig | None = None,
) -> ConversionResult:
    """Inline every image referenced by a note.

    Wiki embeds are processed before Markdown images, each group in document
    order. A reference that cannot be embedded is left as written and
    counted as skipped; it never stops the others from being processed.
    Every embedded reference is replaced at its own position, so duplicate
    references are each replaced and inserted data is never scanned again.

    Args:
        text: The note's Markdown source
        document_path: Path of the note, the base for relative links
        vault: File access capabilities
        config: Size and type limits (defaults apply when omitted)

    Returns:
        ConversionResult with the rewritten text and skip count

    Raises:
        ConversionError: Something other than a per-image failure went
            wrong, e.g. the vault itself raised. No partial text is returned.
    """
    config = config or EmbedConfig()

    try:
        wiki_outcomes = _embed_all(
            scan_wiki_references(text), document_path, vault, config
        )

        # Markdown images are looked for in the text as it reads once the
        # embedded wiki references are replaced.
        embedded_spans = [
            (o.reference.start, o.reference.end) for o in wiki_outcomes if o.ok
        ]
        markdown_outcomes = _embed_all(
            _scan_markdown_between(text, embedded_spans), document_path, vault, config
        )

        outcomes = wiki_outcomes + markdown_outcomes
        rewritten = _splice(text, outcomes, config)
    except Exception as e:
        raise ConversionError("Failed to convert images") from e

    skipped = sum(1 for outcome in outcomes if not outcome.ok)
    return ConversionResult(
        text=rewritten, skipped_count=skipped, outcomes=tuple(outcomes)
    )


def convert_note(note_path: Path, config: Config | None = None) -> ConversionResult:
    """Read a note from disk and inline its images.

    Links are resolved inside the vault root chosen by config.

    Raises:
        OSError: The note itself cannot be read
        ConversionError: As for convert()
    """
    config = config or Config.find_and_load(note_path.parent)
    text = note_path.read_text(encoding="utf-8")
    vault = FileSystemVault(config.get_vault_root(note_path))
    return convert(text, str(note_path), vault, config.embed)
