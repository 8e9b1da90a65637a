"""Metadata tag extraction and filtering."""

import re
from collections.abc import Iterable, Mapping

Tags = list[tuple[str, str]]

# Some fixed structural names, plus keys beginning with an underscore (e.g.
# _STATISTICS_* written by mkvmerge) or in reversed domain name notation
# (e.g. com.apple.quicktime.*).
BORING_TAG_PATTERN = re.compile(
    r"^((major_brand|minor_version|compatible_brands|creation_time|handler_name|encoder)$|_|com\.)",
    re.IGNORECASE,
)


def is_boring(key: str) -> bool:
    """Whether a tag key is mundane enough to hide by default."""
    return BORING_TAG_PATTERN.match(key) is not None


def to_tags(tags: Mapping[str, str]) -> Tags:
    """Ordered (key, value) pairs from a raw tag mapping.

    Empty values are dropped; some FFmpeg versions expose them and others
    don't.
    """
    return [(key, value) for key, value in tags.items() if value != ""]


def filtered_tags(tags: Iterable[tuple[str, str]]) -> Tags:
    """Drop boring tags, preserving order."""
    return [(key, value) for key, value in tags if not is_boring(key)]
