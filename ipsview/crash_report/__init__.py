"""
ipsview Crash Report Module

Decodes Apple .ips crash reports and builds the renderer-agnostic section
model from them. Everything in this package is pure: no I/O beyond
``decode_file`` and no shared state.
"""

from .decoder import decode, decode_file, CRASH_REPORT_BUG_TYPE
from .models import Metadata, Report, Frame, BinaryImage, Thread, ThreadState, RegisterValue
from .registers import ThreadStateLayouts, ThreadStateLayout, build_register_state
from .rows import (
    Section, Span, SpanStyle, FieldRow, BlockRow, FrameRow, RegisterRow,
    RegisterState, ThreadBlock, ImageRow, GroupRow,
)
from .sections import SectionBuilder, build_sections
from .symbols import resolve_frame, resolve_frames

__all__ = [
    'decode', 'decode_file', 'CRASH_REPORT_BUG_TYPE',
    'Metadata', 'Report', 'Frame', 'BinaryImage', 'Thread', 'ThreadState', 'RegisterValue',
    'ThreadStateLayouts', 'ThreadStateLayout', 'build_register_state',
    'Section', 'Span', 'SpanStyle', 'FieldRow', 'BlockRow', 'FrameRow', 'RegisterRow',
    'RegisterState', 'ThreadBlock', 'ImageRow', 'GroupRow',
    'SectionBuilder', 'build_sections',
    'resolve_frame', 'resolve_frames',
]
