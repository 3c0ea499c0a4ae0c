"""Watch mode for copyembed - re-convert a note when it or its images change."""

import os
import threading
import time
from datetime import datetime
from pathlib import Path

from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from .config import Config
from .embed import convert_note
from .errors import ConversionError
from .logging import error, exception, info, setup_logging, warning
from .ratelimit import RateLimiter
from .scanner import ALLOWED_EXTENSIONS


class NoteEventHandler(FileSystemEventHandler):
    """Handle file system events for a watched note."""

    def __init__(
        self,
        note_path: Path,
        convert_callback,
        output_path: Path | None = None,
        debounce_seconds: float = 0.2,
    ):
        super().__init__()
        self.note_path = Path(note_path).resolve()
        self.output_path = Path(output_path).resolve() if output_path else None
        self.convert_callback = convert_callback
        self.debounce_seconds = debounce_seconds
        self.pending_changes: list[str] = []
        self.lock = threading.Lock()
        self._debounce_timer: threading.Timer | None = None

        self.image_extensions = {f".{ext}" for ext in ALLOWED_EXTENSIONS}

    def is_relevant(self, src_path: str) -> bool:
        """Check whether a change to src_path can affect the converted note."""
        normalized_path = src_path.replace("\\", "/")
        if (
            "/.git/" in normalized_path
            or "/.obsidian/" in normalized_path
            or "/.trash/" in normalized_path
        ):
            return False

        path = Path(src_path)
        if self.output_path is not None and path.resolve() == self.output_path:
            return False
        if path.resolve() == self.note_path:
            return True
        return path.suffix.lower() in self.image_extensions

    def on_any_event(self, event):
        if event.is_directory:
            return

        # Editors often save by moving a temp file over the note
        candidates = [event.src_path, getattr(event, "dest_path", "")]
        paths = [os.fsdecode(p) for p in candidates if p]
        relevant = [p for p in paths if self.is_relevant(p)]
        if not relevant:
            return

        with self.lock:
            for src_path in relevant:
                if src_path not in self.pending_changes:
                    self.pending_changes.append(src_path)

            if self._debounce_timer is not None:
                self._debounce_timer.cancel()

            self._debounce_timer = threading.Timer(
                self.debounce_seconds, self.process_changes
            )
            self._debounce_timer.daemon = True
            self._debounce_timer.start()

    def process_changes(self):
        """Run the conversion for the collected changes."""
        with self.lock:
            if not self.pending_changes:
                return
            self.pending_changes.clear()

        self.convert_callback()


def watch(
    note_path: Path,
    output_path: Path,
    config: Config,
    verbose: bool = False,
) -> None:
    """Keep output_path up to date with the converted note.

    Args:
        note_path: Markdown note to convert
        output_path: File the converted note is written to
        config: Configuration object
        verbose: Enable verbose output
    """
    setup_logging(verbose=verbose)

    vault_root = config.get_vault_root(note_path)
    if not vault_root.is_dir():
        error(f"Vault root does not exist: {vault_root}")
        return

    limiter = RateLimiter(config.min_interval)

    def convert_callback():
        if not limiter.try_acquire():
            # Retry once the interval has passed so the last change is not lost.
            timer = threading.Timer(limiter.remaining(), convert_callback)
            timer.daemon = True
            timer.start()
            return

        timestamp = datetime.now().strftime("%H:%M:%S")
        start_time = time.time()
        try:
            result = convert_note(note_path, config)
        except ConversionError:
            exception(f"[{timestamp}] Error converting {note_path.name}")
            return
        except (OSError, UnicodeDecodeError) as e:
            error(f"[{timestamp}] Could not read {note_path.name}: {e}")
            return

        try:
            output_path.write_text(result.text, encoding="utf-8")
        except OSError as e:
            error(f"[{timestamp}] Could not update {output_path.name}: {e}")
            return

        elapsed = time.time() - start_time
        info(f"[{timestamp}] Converted {note_path.name} ({elapsed:.2f}s)")
        if result.skipped_count:
            warning(f"{result.skipped_count} image(s) skipped")

    info(f"Watching {note_path.name} in {vault_root} (Press Ctrl+C to stop)")
    convert_callback()

    handler = NoteEventHandler(note_path, convert_callback, output_path=output_path)
    observer = Observer()
    observer.schedule(handler, str(vault_root), recursive=True)
    if not note_path.resolve().is_relative_to(vault_root):
        observer.schedule(handler, str(note_path.resolve().parent), recursive=False)
    observer.start()

    try:
        while True:
            time.sleep(1)
    except KeyboardInterrupt:
        info("\nStopping watch mode...")
        observer.stop()

    observer.join()
