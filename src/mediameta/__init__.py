"""mediameta - media file metadata for human consumption."""

__version__ = "0.1.0"
