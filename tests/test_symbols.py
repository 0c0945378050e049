"""
Tests for crash_report/symbols.py - frame address and label resolution.
"""

import pytest

from ipsview.crash_report.models import BinaryImage, Frame
from ipsview.crash_report.symbols import resolve_frame, resolve_frames, frame_label, UNKNOWN_IMAGE


@pytest.fixture
def images():
    return [BinaryImage(base=0x1000, size=0x100, name="A")]


class TestResolveFrame:
    """Tests for resolve_frame()."""

    def test_address_is_base_plus_offset(self, images):
        """Test resolution against an in-range image."""
        row = resolve_frame(0, Frame(imageIndex=0, imageOffset=0x10), images)
        assert row.address == 0x1010
        assert row.image_name == "A"
        assert row.image_base == 0x1000
        assert row.label == "0x1000 + 16"

    def test_out_of_range_index(self, images):
        """Test that a missing image resolves to Unknown at base 0."""
        row = resolve_frame(0, Frame(imageIndex=5, imageOffset=0x10), images)
        assert row.image_name == UNKNOWN_IMAGE == "Unknown"
        assert row.address == 0x10
        assert row.label == "0x0 + 16"

    def test_negative_index(self, images):
        """Test that negative indices do not wrap around."""
        row = resolve_frame(0, Frame(imageIndex=-1, imageOffset=4), images)
        assert row.image_name == "Unknown"
        assert row.address == 4

    def test_image_without_name(self):
        """Test that a nameless image reports Unknown but keeps its base."""
        row = resolve_frame(0, Frame(imageIndex=0, imageOffset=1), [BinaryImage(base=0x2000, size=1)])
        assert row.image_name == "Unknown"
        assert row.address == 0x2001

    def test_symbol_with_location(self, images):
        """Test that symbolicated frames show symbol + location."""
        frame = Frame(imageIndex=0, imageOffset=0x20, symbol="main", symbolLocation=32)
        row = resolve_frame(3, frame, images)
        assert row.index == 3
        assert row.label == "main + 32"
        assert row.symbol == "main"
        assert row.symbol_location == 32

    def test_symbol_without_location(self, images):
        """Test a symbol with no location offset."""
        row = resolve_frame(0, Frame(imageIndex=0, imageOffset=0, symbol="start"), images)
        assert row.label == "start"

    def test_zero_symbol_location_kept(self, images):
        """Test that a symbolLocation of 0 is still printed."""
        row = resolve_frame(0, Frame(imageIndex=0, imageOffset=0, symbol="f", symbolLocation=0), images)
        assert row.label == "f + 0"

    def test_unsymbolicated_with_location(self, images):
        """Test the base + offset expression followed by a location."""
        row = resolve_frame(0, Frame(imageIndex=0, imageOffset=8, symbolLocation=2), images)
        assert row.label == "0x1000 + 8 + 2"


class TestResolveFrames:
    """Tests for resolve_frames() and frame_label()."""

    def test_frames_are_numbered_in_order(self, images):
        """Test that frame indices follow backtrace position."""
        frames = [Frame(imageIndex=0, imageOffset=i) for i in range(3)]
        rows = resolve_frames(frames, images)
        assert isinstance(rows, tuple)
        assert [row.index for row in rows] == [0, 1, 2]
        assert [row.address for row in rows] == [0x1000, 0x1001, 0x1002]

    def test_empty_backtrace(self, images):
        """Test that no frames yields no rows."""
        assert resolve_frames([], images) == ()

    def test_frame_label_uses_hex_base(self):
        """Test the label of an unsymbolicated frame."""
        assert frame_label(Frame(imageOffset=255), 0x180000000) == "0x180000000 + 255"
