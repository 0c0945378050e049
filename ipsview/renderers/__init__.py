"""
ipsview Renderers

Turn the section list built from a crash report into an output artifact:

- text: Apple .crash style plain text
- html: escaped HTML with <details> groups and highlight spans
- tree: rich.tree.Tree with collapsible branches
"""

from typing import Sequence

from ipsview.errors import IpsViewError
from ipsview.crash_report.rows import Section
from .text import render_text
from .markup import render_html
from .tree import render_tree, tree_to_text

RENDERERS = {
    "text": render_text,
    "html": render_html,
    "tree": render_tree,
}


def render(sections: Sequence[Section], fmt: str = "text", **options):
    """
    Render sections in the requested format.

    ``text`` and ``html`` return a string; ``tree`` returns a rich Tree.
    Keyword options are passed through to the renderer.
    """
    renderer = RENDERERS.get(fmt)
    if renderer is None:
        raise IpsViewError(f"Unknown output format '{fmt}' (expected one of: {', '.join(sorted(RENDERERS))})")
    return renderer(sections, **options)


__all__ = ['render', 'render_text', 'render_html', 'render_tree', 'tree_to_text', 'RENDERERS']
