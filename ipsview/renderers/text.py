"""
Plain text renderer.

Produces the line-oriented layout of Apple's .crash files: padded labels,
column-aligned frame listings and a four-per-line register grid.
"""

from typing import List, Sequence

from ipsview.crash_report.rows import (
    BlockRow, FieldRow, FrameRow, GroupRow, ImageRow, RegisterState, Section, ThreadBlock,
)


# Label column widths, per section
LABEL_WIDTHS = {
    "process": 20,
    "exception": 18,
}
EXTRA_LABEL_WIDTH = 16
REGISTERS_PER_LINE = 4

# Sections printed without a title line, as in Apple's own text reports
UNTITLED_SECTIONS = ("process", "exception", "threads")

# Field rows preceded by a blank line
SPACED_LABELS = ("Date/Time", "Incident Identifier", "Termination Reason", "Triggered by Thread")

SECTION_HEADINGS = {
    "asi": "Application Specific Information:",
    "last_exception_backtrace": "Last Exception Backtrace:",
    "binary_images": "Binary Images:",
    "external_modifications": "External Modification Summary:",
    "vm_summary": "VM Region Summary:",
    "filtered_log": "Filtered log messages:",
}


def format_field(row: FieldRow, width: int) -> str:
    return f"{row.label + ':':<{width}} {row.value}"


def format_frame(row: FrameRow) -> str:
    return f"{row.index:>2}  {row.image_name:<30}\t0x{row.address:016x} {row.label}"


def format_image(row: ImageRow, compact_uuids: bool = True) -> str:
    uuid = row.compact_uuid if compact_uuids else row.uuid
    return (
        f"       0x{row.base:x} - "
        f"       0x{row.end:x}"
        f" {row.name:<30}"
        f" {row.arch} "
        f" <{uuid}>"
        f" {row.path}"
    )


def format_register_state(state: RegisterState) -> List[str]:
    lines = [f"Thread {state.thread_id} crashed with {state.title}:"]

    regs = state.registers
    for i in range(0, len(regs), REGISTERS_PER_LINE):
        line = ""
        for reg in regs[i:i + REGISTERS_PER_LINE]:
            line += f"  {reg.name:>4}: {reg.formatted_value}"
            if reg.description:
                line += f" {reg.description}"
        lines.append(line)

    if state.extras:
        lines.append("")
        for row in state.extras:
            lines.append(format_field(row, EXTRA_LABEL_WIDTH))
    return lines


def format_thread_header(block: ThreadBlock) -> str:
    header = f"Thread {block.display_id}"
    if block.name:
        header += f" name:  {block.name}"
    if block.crashed:
        header += " Crashed"
    header += ":"
    if block.queue:
        header += f":  Dispatch queue: {block.queue}"
    return header


def _section_lines(section: Section, compact_uuids: bool) -> List[str]:
    lines = []
    heading = SECTION_HEADINGS.get(section.key, f"{section.title}:")
    if section.key not in UNTITLED_SECTIONS:
        lines.append(heading)

    width = LABEL_WIDTHS.get(section.key, 0)
    states = []

    for row in section.rows:
        if isinstance(row, FieldRow):
            if row.label in SPACED_LABELS and lines:
                lines.append("")
            if width:
                lines.append(format_field(row, width))
            else:
                lines.append(f"{row.label}: {row.value}")
        elif isinstance(row, BlockRow):
            if row.label:
                lines.append("")
                lines.append(f"{row.label}: {row.text}")
            else:
                lines.append(row.text)
        elif isinstance(row, FrameRow):
            lines.append(format_frame(row))
        elif isinstance(row, ThreadBlock):
            lines.append(format_thread_header(row))
            lines.extend(format_frame(frame) for frame in row.frames)
            lines.append("")
            if row.state is not None:
                states.append(row.state)
        elif isinstance(row, ImageRow):
            lines.append(format_image(row, compact_uuids))
        elif isinstance(row, GroupRow):
            lines.append(f"  {row.title}:")
            lines.extend(f"    {counter.label}: {counter.value}" for counter in row.rows)

    # Register state follows the full thread list
    for state in states:
        if state.registers or state.extras:
            lines.extend(format_register_state(state))
            lines.append("")

    return lines


def render_text(sections: Sequence[Section], compact_uuids: bool = True) -> str:
    """
    Render sections as a plain text crash report.

    Args:
        sections: Output of ``build_sections``
        compact_uuids: Strip hyphens from image UUIDs (Apple's text style)

    Returns:
        Report text ending in a newline
    """
    chunks = []
    for section in sections:
        lines = _section_lines(section, compact_uuids)
        while lines and lines[-1] == "":
            lines.pop()
        if lines:
            chunks.append("\n".join(lines))
    return "\n\n".join(chunks) + "\n"
