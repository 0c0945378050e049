"""
HTML renderer.

Each section becomes a ``<details>`` group (open unless the section is
collapsed by default). All report text is escaped; addresses, numbers and
symbols are wrapped in ``<span>`` elements with the classes ``addr``,
``number``, ``symbol`` and ``offset`` so a stylesheet can highlight them.
"""

from html import escape
from typing import List, Sequence

from ipsview.crash_report.rows import (
    BlockRow, FieldRow, FrameRow, GroupRow, ImageRow, RegisterState, Section, Span,
    SpanStyle, ThreadBlock,
)


SPAN_CLASSES = {
    SpanStyle.NUMBER: "number",
    SpanStyle.ADDRESS: "addr",
    SpanStyle.SYMBOL: "symbol",
}

DOCUMENT_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
<head>
<meta charset="utf-8">
<title>{title}</title>
</head>
<body>
<div class="crash-report">
{body}
</div>
</body>
</html>
"""


def _span(css_class: str, content: str) -> str:
    return f'<span class="{css_class}">{content}</span>'


def _div(css_class: str, content: str) -> str:
    return f'<div class="{css_class}">{content}</div>'


def _address(value: int) -> str:
    return _span("addr", escape(f"0x{value:016x}"))


def render_span(span: Span) -> str:
    css_class = SPAN_CLASSES.get(span.style)
    if css_class is None:
        return escape(span.text)
    return _span(css_class, escape(span.text))


def render_field(row: FieldRow) -> str:
    value = "".join(render_span(span) for span in row.spans)
    return _div("info-label", escape(f"{row.label}:")) + _div("info-value", value)


def render_frame(row: FrameRow) -> str:
    details = _address(row.address)
    if row.symbol is not None:
        details += " " + _span("symbol", escape(row.symbol))
        if row.symbol_location is not None:
            details += " " + _span("offset", "+ " + _span("number", str(row.symbol_location)))
    else:
        details += " " + _span("symbol unresolved", escape(row.label))

    return _div(
        "stack-frame",
        _div("frame-index", str(row.index))
        + _div("frame-image", escape(row.image_name))
        + _div("frame-details", details),
    )


def render_register_state(state: RegisterState) -> str:
    registers = []
    for reg in state.registers:
        content = (
            _div("register-name", escape(f"{reg.name}:"))
            + _div("register-value", escape(reg.formatted_value))
        )
        if reg.description:
            content += _div("register-desc", escape(reg.description))
        registers.append(_div("register", content))

    html = f'<h4 class="thread-state-header">{escape(state.title)}</h4>'
    html += _div("registers", "".join(registers))
    if state.extras:
        html += _div("info-grid", "".join(render_field(row) for row in state.extras))
    return _div("thread-state-container", html)


def render_thread(block: ThreadBlock) -> str:
    summary = "Thread " + _span("number", escape(block.display_id))
    if block.name:
        summary += " - " + escape(block.name)
    if block.queue:
        summary += f" ({escape(block.queue)})"
    if block.crashed:
        summary += " CRASHED"

    body = f'<summary class="thread-header">{summary}</summary>'
    if block.frames:
        body += _div("frames-container", "".join(render_frame(frame) for frame in block.frames))
    if block.state is not None:
        body += render_register_state(block.state)

    open_attr = " open" if block.crashed else ""
    css_class = "thread-item crashed" if block.crashed else "thread-item"
    return _div(css_class, f"<details{open_attr}>{body}</details>")


def render_image(row: ImageRow, compact_uuids: bool = False) -> str:
    uuid = row.compact_uuid if compact_uuids else row.uuid
    details = (
        _span("image-arch", escape(row.arch))
        + " " + _span("image-uuid", escape(f"<{uuid}>"))
        + " " + _span("image-path", escape(row.path))
    )
    return _div(
        "binary-image",
        _div("image-range", _address(row.base) + " - " + _address(row.end))
        + _div("image-name", escape(row.name))
        + _div("image-details", details),
    )


def render_group(row: GroupRow) -> str:
    lines = [f"<div>{escape(row.title)}:</div>"]
    lines.extend(
        f"<div>  {escape(counter.label)}: {_span('number', escape(counter.value))}</div>"
        for counter in row.rows
    )
    return _div("info-label", escape(f"{row.label}:")) + _div("info-value", "".join(lines))


def render_block(row: BlockRow, section_key: str) -> str:
    css_class = section_key.replace("_", "-")
    content = escape(row.text)
    if row.label:
        content = escape(f"{row.label}: ") + content
    return f'<pre class="{css_class}">{content}</pre>'


def render_section(section: Section, compact_uuids: bool = False) -> str:
    grid: List[str] = []
    items: List[str] = []

    def flush_grid():
        if grid:
            items.append(_div("info-grid", "".join(grid)))
            grid.clear()

    for row in section.rows:
        if isinstance(row, (FieldRow, GroupRow)):
            grid.append(render_field(row) if isinstance(row, FieldRow) else render_group(row))
            continue
        flush_grid()
        if isinstance(row, BlockRow):
            items.append(render_block(row, section.key))
        elif isinstance(row, FrameRow):
            items.append(render_frame(row))
        elif isinstance(row, ThreadBlock):
            items.append(render_thread(row))
        elif isinstance(row, ImageRow):
            items.append(render_image(row, compact_uuids))
    flush_grid()

    open_attr = "" if section.collapsed else " open"
    return (
        f'<div class="crash-section" id="{escape(section.key)}">'
        f"<details{open_attr}><summary>{escape(section.title)}</summary>"
        f'{_div("section-container", "".join(items))}'
        f"</details></div>"
    )


def render_html(sections: Sequence[Section], compact_uuids: bool = False,
                standalone: bool = False, title: str = "Crash Report") -> str:
    """
    Render sections as HTML.

    Args:
        sections: Output of ``build_sections``
        compact_uuids: Strip hyphens from image UUIDs
        standalone: Wrap the fragment in a complete HTML document
        title: Document title when ``standalone`` is set

    Returns:
        HTML fragment (or document)
    """
    body = "\n".join(render_section(section, compact_uuids) for section in sections)
    if standalone:
        return DOCUMENT_TEMPLATE.format(title=escape(title), body=body)
    return body
