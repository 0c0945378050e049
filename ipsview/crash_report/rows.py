"""
Renderer-agnostic section model.

A report is turned into an ordered tuple of ``Section`` objects, each holding
typed rows. Renderers only ever look at these types; all address arithmetic,
register layout and field selection has already happened by the time a row
exists.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union


class SpanStyle(Enum):
    """How a fragment of a field value should be highlighted"""
    TEXT = "text"
    NUMBER = "number"
    ADDRESS = "address"
    SYMBOL = "symbol"


@dataclass(frozen=True)
class Span:
    text: str
    style: SpanStyle = SpanStyle.TEXT

    def to_dict(self) -> dict:
        return {'text': self.text, 'style': self.style.value}


def text(value: Any) -> Span:
    return Span(str(value))


def number(value: Any) -> Span:
    return Span(str(value), SpanStyle.NUMBER)


def address(value: int, width: int = 16) -> Span:
    return Span(f"0x{value:0{width}x}", SpanStyle.ADDRESS)


@dataclass(frozen=True)
class FieldRow:
    """A ``label: value`` line, value split into styled spans"""
    label: str
    spans: Tuple[Span, ...] = ()
    kind: str = field(default="field", init=False)

    @property
    def value(self) -> str:
        return "".join(span.text for span in self.spans)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'label': self.label,
            'value': self.value,
            'spans': [span.to_dict() for span in self.spans],
        }


@dataclass(frozen=True)
class BlockRow:
    """Verbatim, possibly multi-line text"""
    text: str
    label: Optional[str] = None
    kind: str = field(default="block", init=False)

    def to_dict(self) -> dict:
        return {'kind': self.kind, 'label': self.label, 'text': self.text}


@dataclass(frozen=True)
class FrameRow:
    """One resolved stack frame"""
    index: int
    image_name: str
    address: int
    label: str
    image_base: int
    image_offset: int
    symbol: Optional[str] = None
    symbol_location: Optional[int] = None
    kind: str = field(default="frame", init=False)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'index': self.index,
            'image_name': self.image_name,
            'address': self.address,
            'label': self.label,
            'image_base': self.image_base,
            'image_offset': self.image_offset,
            'symbol': self.symbol,
            'symbol_location': self.symbol_location,
        }


@dataclass(frozen=True)
class RegisterRow:
    name: str
    value: int
    width: int = 16  # hex digits
    description: Optional[str] = None
    kind: str = field(default="register", init=False)

    @property
    def formatted_value(self) -> str:
        return f"0x{self.value:0{self.width}x}"

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'name': self.name,
            'value': self.value,
            'width': self.width,
            'description': self.description,
        }


@dataclass(frozen=True)
class RegisterState:
    """Register dump of the crashed thread, laid out for its flavor"""
    flavor: Optional[str]
    title: str
    thread_id: Optional[int]
    registers: Tuple[RegisterRow, ...] = ()
    extras: Tuple[FieldRow, ...] = ()
    kind: str = field(default="register_state", init=False)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'flavor': self.flavor,
            'title': self.title,
            'thread_id': self.thread_id,
            'registers': [reg.to_dict() for reg in self.registers],
            'extras': [row.to_dict() for row in self.extras],
        }


@dataclass(frozen=True)
class ThreadBlock:
    thread_id: Optional[int]
    name: Optional[str] = None
    queue: Optional[str] = None
    crashed: bool = False
    frames: Tuple[FrameRow, ...] = ()
    state: Optional[RegisterState] = None
    kind: str = field(default="thread", init=False)

    @property
    def display_id(self) -> str:
        """Thread id as printed; ``?`` when the report carries none"""
        return "?" if self.thread_id is None else str(self.thread_id)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'thread_id': self.thread_id,
            'name': self.name,
            'queue': self.queue,
            'crashed': self.crashed,
            'frames': [frame.to_dict() for frame in self.frames],
            'state': self.state.to_dict() if self.state else None,
        }


@dataclass(frozen=True)
class ImageRow:
    """Binary image address range"""
    base: int
    end: int
    name: str
    arch: str
    uuid: str
    path: str
    kind: str = field(default="image", init=False)

    @property
    def compact_uuid(self) -> str:
        return self.uuid.replace("-", "")

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'base': self.base,
            'end': self.end,
            'name': self.name,
            'arch': self.arch,
            'uuid': self.uuid,
            'path': self.path,
        }


@dataclass(frozen=True)
class GroupRow:
    """Titled sub-group of field rows (external modification counters)"""
    key: str
    label: str
    title: str
    rows: Tuple[FieldRow, ...] = ()
    kind: str = field(default="group", init=False)

    def to_dict(self) -> dict:
        return {
            'kind': self.kind,
            'key': self.key,
            'label': self.label,
            'title': self.title,
            'rows': [row.to_dict() for row in self.rows],
        }


Row = Union[FieldRow, BlockRow, FrameRow, ThreadBlock, ImageRow, GroupRow]


@dataclass(frozen=True)
class Section:
    key: str
    title: str
    collapsed: bool = False
    rows: Tuple[Row, ...] = ()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'key': self.key,
            'title': self.title,
            'collapsed': self.collapsed,
            'rows': [row.to_dict() for row in self.rows],
        }
