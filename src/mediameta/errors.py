"""Error types for metadata extraction.

Every error aborts metadata construction for the file being processed.
They all derive from OSError so callers can treat them as I/O failures.
"""


class MetadataError(OSError):
    """Base exception for all metadata failures."""

    pass


class NotAFileError(MetadataError):
    """Raised when the input path does not exist or is not a regular file."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f'"{path}" does not exist or is not a file')


class UnrecognizedContainerError(MetadataError):
    """Raised when ffprobe cannot demux the file."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class CodecInitError(MetadataError):
    """Raised when a decoder cannot be set up from a stream's codec parameters."""

    def __init__(self, stream_index: int, reason: str):
        self.stream_index = stream_index
        self.reason = reason
        super().__init__(f"stream #{stream_index}: {reason}")


class IOFailureError(MetadataError):
    """Raised when reading the file itself (size, checksum) fails."""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class FFprobeNotFoundError(MetadataError):
    """Raised when the ffprobe executable is not available."""

    def __init__(self, executable: str = "ffprobe"):
        self.executable = executable
        super().__init__(
            f"{executable} not found. Please install FFmpeg to inspect media files."
        )
