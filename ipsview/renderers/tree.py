"""
Rich tree renderer.

Builds a ``rich.tree.Tree`` with one collapsible branch per section, thread
and register state. Collapsed branches keep their children but are drawn
folded until ``expanded`` is flipped, which makes the tree usable as a live
structure in an interactive console.
"""

from typing import Sequence

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from ipsview.crash_report.rows import (
    BlockRow, FieldRow, FrameRow, GroupRow, ImageRow, RegisterState, Section, SpanStyle,
    ThreadBlock,
)


SPAN_STYLES = {
    SpanStyle.TEXT: "",
    SpanStyle.NUMBER: "cyan",
    SpanStyle.ADDRESS: "magenta",
    SpanStyle.SYMBOL: "green",
}


def field_text(row: FieldRow) -> Text:
    label = Text(f"{row.label}: ", style="bold")
    return Text.assemble(label, *[(span.text, SPAN_STYLES[span.style]) for span in row.spans])


def frame_text(row: FrameRow) -> Text:
    return Text.assemble(
        (f"{row.index:>2}  ", "dim"),
        (f"{row.image_name:<30} ", "yellow"),
        (f"0x{row.address:016x}", SPAN_STYLES[SpanStyle.ADDRESS]),
        " ",
        (row.label, SPAN_STYLES[SpanStyle.SYMBOL]),
    )


def image_text(row: ImageRow, compact_uuids: bool = False) -> Text:
    uuid = row.compact_uuid if compact_uuids else row.uuid
    return Text.assemble(
        (f"0x{row.base:x}", SPAN_STYLES[SpanStyle.ADDRESS]),
        " - ",
        (f"0x{row.end:x}", SPAN_STYLES[SpanStyle.ADDRESS]),
        " ",
        (row.name, "bold"),
        f" {row.arch} <{uuid}> {row.path}",
    )


def add_register_state(parent: Tree, state: RegisterState) -> Tree:
    node = parent.add(Text(state.title, style="bold red"))
    for reg in state.registers:
        line = Text.assemble(
            (f"{reg.name:>4}: ", "bold"),
            (reg.formatted_value, SPAN_STYLES[SpanStyle.ADDRESS]),
        )
        if reg.description:
            line.append(f" {reg.description}")
        node.add(line)
    for row in state.extras:
        node.add(field_text(row))
    return node


def add_thread(parent: Tree, block: ThreadBlock) -> Tree:
    label = Text("Thread ")
    label.append(block.display_id, style=SPAN_STYLES[SpanStyle.NUMBER])
    if block.name:
        label.append(f" - {block.name}")
    if block.queue:
        label.append(f" ({block.queue})")
    if block.crashed:
        label.append(" CRASHED", style="bold red")

    node = parent.add(label, expanded=block.crashed)
    for frame in block.frames:
        node.add(frame_text(frame))
    if block.state is not None:
        add_register_state(node, block.state)
    return node


def add_section(root: Tree, section: Section, compact_uuids: bool = False,
                expand_all: bool = False) -> Tree:
    node = root.add(Text(section.title, style="bold"), expanded=expand_all or not section.collapsed)

    for row in section.rows:
        if isinstance(row, FieldRow):
            node.add(field_text(row))
        elif isinstance(row, BlockRow):
            text = Text(f"{row.label}: ", style="bold") if row.label else Text()
            text.append(row.text)
            node.add(text)
        elif isinstance(row, FrameRow):
            node.add(frame_text(row))
        elif isinstance(row, ThreadBlock):
            thread_node = add_thread(node, row)
            if expand_all:
                thread_node.expanded = True
        elif isinstance(row, ImageRow):
            node.add(image_text(row, compact_uuids))
        elif isinstance(row, GroupRow):
            group = node.add(Text(f"{row.title}:", style="bold"))
            for counter in row.rows:
                group.add(field_text(counter))
    return node


def render_tree(sections: Sequence[Section], compact_uuids: bool = False,
                expand_all: bool = False, title: str = "Crash Report") -> Tree:
    """
    Render sections as a rich tree.

    Args:
        sections: Output of ``build_sections``
        compact_uuids: Strip hyphens from image UUIDs
        expand_all: Ignore collapse hints and expand every branch
        title: Label of the root node

    Returns:
        rich.tree.Tree ready for ``Console.print``
    """
    root = Tree(Text(title, style="bold underline"))
    for section in sections:
        add_section(root, section, compact_uuids=compact_uuids, expand_all=expand_all)
    return root


def tree_to_text(tree: Tree, width: int = 120) -> str:
    """Render a tree to plain (uncoloured) text"""
    console = Console(width=width, record=True, color_system=None, force_terminal=False)
    with console.capture() as capture:
        console.print(tree)
    return capture.get()
