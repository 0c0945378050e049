"""
ipsview: Apple .ips crash report decoder and viewer
"""

__version__ = "0.2.0"
__author__ = "ipsview Development Team"

from ipsview.errors import IpsViewError, FormatError, IpsViewConfigError
from ipsview.crash_report import decode, decode_file, build_sections
from ipsview.renderers import render, render_text, render_html, render_tree

__all__ = [
    'IpsViewError', 'FormatError', 'IpsViewConfigError',
    'decode', 'decode_file', 'build_sections',
    'render', 'render_text', 'render_html', 'render_tree',
]
