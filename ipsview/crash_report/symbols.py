"""
Frame symbolication.

Every stack frame in a report, whether in a thread or in the last exception
backtrace, is resolved here and nowhere else. Symbol names are taken from the
report as-is; frames without one get a ``0x<base> + <offset>`` expression.
"""

from typing import List, Sequence, Tuple

from .models import BinaryImage, Frame
from .rows import FrameRow


UNKNOWN_IMAGE = "Unknown"


def frame_label(frame: Frame, base: int) -> str:
    label = frame.symbol if frame.symbol is not None else f"0x{base:x} + {frame.image_offset}"
    if frame.symbol_location is not None:
        label += f" + {frame.symbol_location}"
    return label


def resolve_frame(index: int, frame: Frame, images: Sequence[BinaryImage]) -> FrameRow:
    """
    Resolve a frame against the report's image list.

    Args:
        index: Position of the frame in its backtrace
        frame: Frame to resolve
        images: ``usedImages`` of the report

    Returns:
        FrameRow with image name, absolute address and display label.
        Out-of-range (or negative) image indices resolve to ``Unknown`` at
        base 0.
    """
    image = images[frame.image_index] if 0 <= frame.image_index < len(images) else None
    name = image.name if image is not None and image.name else UNKNOWN_IMAGE
    base = image.base if image is not None else 0

    return FrameRow(
        index=index,
        image_name=name,
        address=base + frame.image_offset,
        label=frame_label(frame, base),
        image_base=base,
        image_offset=frame.image_offset,
        symbol=frame.symbol,
        symbol_location=frame.symbol_location,
    )


def resolve_frames(frames: List[Frame], images: Sequence[BinaryImage]) -> Tuple[FrameRow, ...]:
    return tuple(resolve_frame(i, frame, images) for i, frame in enumerate(frames))
