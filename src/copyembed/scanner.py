"""Find image references in Markdown text.

Two syntaxes are recognized:

- Obsidian wiki embeds: ``![[folder/image.png]]``
- Standard Markdown images: ``![alt text](folder/image.png)``

Matching is done with a small hand-written tokenizer rather than regular
expressions. Every candidate start looks at a fixed-size window of text at
most, so scanning stays linear even on adversarial input such as long runs
of unclosed brackets.
"""

from dataclasses import dataclass

# Image extensions that can be embedded (lowercase, no leading dot)
ALLOWED_EXTENSIONS = ("png", "jpg", "jpeg", "gif", "webp", "bmp")

WIKI = "wiki"
MARKDOWN = "markdown"

# Longest path (before ".ext") accepted inside ![[...]]
WIKI_PATH_MAX = 256
# Longest alt text and path (before ".ext") accepted in ![alt](path)
MARKDOWN_ALT_MAX = 256
MARKDOWN_PATH_MAX = 512

_EXTENSION_MAX = max(len(ext) for ext in ALLOWED_EXTENSIONS)


@dataclass(frozen=True)
class ImageReference:
    """An image reference found in a document.

    Attributes:
        raw: The exact matched text, e.g. ``![[photo.png]]``
        path: The referenced path as written
        alt: Alt text for Markdown references, None for wiki embeds
        kind: Either ``"wiki"`` or ``"markdown"``
        start: Offset of the first character of ``raw`` in the scanned text
        end: Offset just past the last character of ``raw``
    """

    raw: str
    path: str
    alt: str | None
    kind: str
    start: int
    end: int

    @property
    def label(self) -> str:
        """Text to use as alt text when the reference is rewritten.

        Wiki embeds have no alt text of their own, so the file name without
        its extension is used instead.
        """
        if self.kind == WIKI:
            filename = self.path.split("/")[-1]
            return filename.rpartition(".")[0]
        return self.alt or ""


def image_extension(path: str, max_stem: int) -> str | None:
    """Return the allow-listed extension ``path`` ends with, or None.

    The part of the path before the extension must be between 1 and
    ``max_stem`` characters long.
    """
    stem, dot, ext = path.rpartition(".")
    if not dot:
        return None
    ext = ext.lower()
    if ext not in ALLOWED_EXTENSIONS:
        return None
    if not 1 <= len(stem) <= max_stem:
        return None
    return ext


def scan_wiki_references(text: str) -> list[ImageReference]:
    """Find all ``![[path.ext]]`` embeds in text, left to right."""
    references = []
    window = WIKI_PATH_MAX + 1 + _EXTENSION_MAX
    pos = 0

    while True:
        start = text.find("![[", pos)
        if start == -1:
            break

        path_start = start + 3
        close = text.find("]", path_start, path_start + window + 1)
        if close == -1 or not text.startswith("]]", close):
            pos = start + 1
            continue

        path = text[path_start:close]
        if image_extension(path, WIKI_PATH_MAX) is None:
            pos = start + 1
            continue

        end = close + 2
        references.append(
            ImageReference(
                raw=text[start:end],
                path=path,
                alt=None,
                kind=WIKI,
                start=start,
                end=end,
            )
        )
        pos = end

    return references


def scan_markdown_references(text: str) -> list[ImageReference]:
    """Find all ``![alt](path.ext)`` images in text, left to right."""
    references = []
    window = MARKDOWN_PATH_MAX + 1 + _EXTENSION_MAX
    pos = 0

    while True:
        start = text.find("![", pos)
        if start == -1:
            break

        alt_start = start + 2
        alt_close = text.find("]", alt_start, alt_start + MARKDOWN_ALT_MAX + 1)
        if alt_close == -1 or not text.startswith("(", alt_close + 1):
            pos = start + 1
            continue

        path_start = alt_close + 2
        path_close = text.find(")", path_start, path_start + window + 1)
        if path_close == -1:
            pos = start + 1
            continue

        path = text[path_start:path_close]
        if image_extension(path, MARKDOWN_PATH_MAX) is None:
            pos = start + 1
            continue

        end = path_close + 1
        references.append(
            ImageReference(
                raw=text[start:end],
                path=path,
                alt=text[alt_start:alt_close],
                kind=MARKDOWN,
                start=start,
                end=end,
            )
        )
        pos = end

    return references


def scan_references(text: str) -> list[ImageReference]:
    """Find all image references: wiki embeds first, then Markdown images."""
    return scan_wiki_references(text) + scan_markdown_references(text)
