"""Command-line interface for copyembed."""

import sys
from pathlib import Path

import click

from .config import CONFIG_DIR, CONFIG_FILE, Config

DEFAULT_CONFIG = """\
[embed]
max_file_size = 10485760
allowed_extensions = ["png", "jpg", "jpeg", "gif", "webp", "bmp"]
alt_text_max_length = 200

[vault]
root = ""

[clipboard]
min_interval_ms = 500
"""


def get_default_config_content() -> str:
    """Get the default config.toml content from bundled defaults."""
    from .resources import read_package_text

    return read_package_text("copyembed.defaults", CONFIG_FILE) or DEFAULT_CONFIG


def load_config(note: Path, vault: Path | None) -> Config:
    """Load the config for a note, applying a --vault override."""
    import tomllib

    try:
        config = Config.find_and_load(note.parent)
    except tomllib.TOMLDecodeError as e:
        click.echo(f"Error: Invalid config file: {e}", err=True)
        raise SystemExit(1)

    if vault is not None:
        config.vault.root = str(vault.resolve())
    return config


def skipped_message(skipped: int) -> str:
    return f"{skipped} image(s) skipped - too large or unsupported"


@click.group()
@click.version_option()
def main():
    """copyembed - inline a Markdown note's images as base64 data URIs."""
    pass


@main.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing config")
def init(force: bool):
    """Create .copyembed/config.toml in the current directory."""
    config_file = Path.cwd() / CONFIG_DIR / CONFIG_FILE

    if config_file.exists() and not force:
        click.echo(f"Error: {CONFIG_DIR}/{CONFIG_FILE} already exists", err=True)
        click.echo("Use --force to overwrite", err=True)
        raise SystemExit(1)

    config_file.parent.mkdir(exist_ok=True)
    config_file.write_text(get_default_config_content(), encoding="utf-8")
    click.echo(f"Created {config_file}")


@main.command()
@click.argument(
    "note", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--output", "-o", type=click.Path(dir_okay=False, path_type=Path),
    help="Write the converted note to FILE instead of stdout",
)
@click.option("--copy", "-c", "to_clipboard", is_flag=True, help="Copy to clipboard")
@click.option(
    "--vault", type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Vault root links are resolved against",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.option("--quiet", "-q", is_flag=True, help="Only report errors")
def convert(
    note: Path,
    output: Path | None,
    to_clipboard: bool,
    vault: Path | None,
    verbose: bool,
    quiet: bool,
):
    """Inline the images of NOTE."""
    from .clipboard import ClipboardUnavailable, copy_to_clipboard
    from .embed import convert_note
    from .errors import ConversionError
    from .logging import exception, info, setup_logging, warning

    to_stdout = output is None and not to_clipboard
    # Keep stdout clean for the note itself
    setup_logging(verbose=verbose, quiet=quiet, stdout=sys.stderr if to_stdout else None)

    config = load_config(note, vault)

    try:
        result = convert_note(note, config)
    except (ConversionError, OSError, UnicodeDecodeError):
        exception("Error converting note. Run with --verbose for details.")
        raise SystemExit(1)

    if to_clipboard:
        try:
            copy_to_clipboard(result.text)
        except ClipboardUnavailable as e:
            exception(f"Clipboard unavailable: {e}")
            raise SystemExit(1)
        if result.skipped_count:
            info(f"Copied! ({skipped_message(result.skipped_count)})")
        else:
            info("Markdown with embedded images copied!")

    if output is not None:
        output.write_text(result.text, encoding="utf-8")
        info(f"Wrote {output} ({result.embedded_count} image(s) embedded)")
        if result.skipped_count:
            warning(skipped_message(result.skipped_count))

    if to_stdout:
        click.echo(result.text, nl=False)
        if result.skipped_count:
            warning(skipped_message(result.skipped_count))


@main.command()
@click.argument(
    "note", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--vault", type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Vault root links are resolved against",
)
def check(note: Path, vault: Path | None):
    """Show which images of NOTE can be embedded."""
    from .doctor import check_note
    from .errors import ConversionError
    from .logging import setup_logging

    # Per-image warnings are reported below instead
    setup_logging(quiet=True)

    config = load_config(note, vault)
    try:
        errors, warnings, ok = check_note(note, config)
    except (ConversionError, OSError, UnicodeDecodeError) as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    for line in ok:
        click.echo(f"OK: {line}")
    for line in warnings:
        click.echo(f"Warning: {line}", err=True)
    for line in errors:
        click.echo(f"Skipped: {line}", err=True)

    if errors:
        raise SystemExit(1)


@main.command()
@click.argument(
    "note", type=click.Path(exists=True, dir_okay=False, path_type=Path)
)
@click.option(
    "--output", "-o", required=True, type=click.Path(dir_okay=False, path_type=Path),
    help="File kept up to date with the converted note",
)
@click.option(
    "--vault", type=click.Path(exists=True, file_okay=False, path_type=Path),
    help="Vault root links are resolved against",
)
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
def watch(note: Path, output: Path, vault: Path | None, verbose: bool):
    """Re-convert NOTE whenever it or its images change."""
    from .watch import watch as do_watch

    config = load_config(note, vault)
    do_watch(note_path=note, output_path=output, config=config, verbose=verbose)


if __name__ == "__main__":
    main()
