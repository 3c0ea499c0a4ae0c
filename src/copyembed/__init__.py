"""copyembed - inline a note's images as base64 data URIs."""

__version__ = "0.1.0"
