"""Per-image diagnostics for a note."""

from __future__ import annotations

from pathlib import Path

from .config import Config
from .embed import convert_note


def check_note(
    note_path: Path, config: Config | None = None
) -> tuple[list[str], list[str], list[str]]:
    """Report what converting note_path would do, per image.

    Returns:
        (errors, warnings, ok): errors name images that would be skipped,
        ok names images that would be embedded.
    """
    errors: list[str] = []
    warnings: list[str] = []
    ok: list[str] = []

    config = config or Config.find_and_load(note_path.parent)
    vault_root = config.get_vault_root(note_path)
    if not vault_root.is_dir():
        errors.append(f"Vault root does not exist: {vault_root}")
        return errors, warnings, ok

    result = convert_note(note_path, config)

    if not result.outcomes:
        warnings.append("No image references found.")

    for outcome in result.outcomes:
        line = outcome.reference.raw[:80]
        if outcome.ok:
            ok.append(line)
        else:
            errors.append(f"{line}: {outcome.reason}")

    return errors, warnings, ok
