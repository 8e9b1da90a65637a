"""Progressive/interlaced classification of the primary video stream."""

from contextlib import closing
from itertools import islice
from typing import Optional

from mediameta.core.probe import Container, FieldOrder, Medium, VideoDecoder
from mediameta.errors import CodecInitError
from mediameta.models.stream import ScanType
from mediameta.utils.logger import get_logger

logger = get_logger(__name__)

MAX_DECODED_FRAMES = 30


def classify_scan_type(container: Container, decode_frames: bool = False) -> Optional[ScanType]:
    """Determine the scan type of the container's best video stream.

    The decoder-reported field order decides when it is explicit. An
    unknown field order is taken as likely progressive, unless
    decode_frames is set, in which case up to MAX_DECODED_FRAMES frames are
    decoded: any interlaced frame makes the stream interlaced, none makes
    it progressive.

    The container's read position afterwards is unspecified.

    Args:
        container: Open container
        decode_frames: Whether to fall back to decoding frames

    Returns:
        ScanType, or None if the container has no video stream

    Raises:
        CodecInitError: If the video decoder cannot be set up
        UnrecognizedContainerError: If the frame scan fails or times out
    """
    stream = container.best_stream(Medium.VIDEO)
    if stream is None:
        return None

    decoder = stream.decoder()
    if not isinstance(decoder, VideoDecoder):
        raise CodecInitError(stream.index, "expected a video decoder")

    field_order = decoder.field_order
    logger.debug("Field order", stream_index=stream.index, field_order=field_order.value)

    if field_order is FieldOrder.PROGRESSIVE:
        return ScanType.PROGRESSIVE
    if field_order.is_interlaced:
        return ScanType.INTERLACED
    if not decode_frames:
        return ScanType.LIKELY_PROGRESSIVE

    frames = container.decode_frames(stream, max_frames=MAX_DECODED_FRAMES)
    with closing(frames):
        for position, frame in enumerate(islice(frames, MAX_DECODED_FRAMES)):
            if frame.is_interlaced():
                logger.debug(
                    "Interlaced frame found", stream_index=stream.index, frame=position
                )
                return ScanType.INTERLACED

    return ScanType.PROGRESSIVE
