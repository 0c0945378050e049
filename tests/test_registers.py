"""
Tests for crash_report/registers.py - thread state layouts.
"""

from ipsview.crash_report.models import ThreadState
from ipsview.crash_report.rows import Span, SpanStyle
from ipsview.crash_report.registers import (
    ThreadStateLayouts, build_register_state, register_rows, extra_rows,
)


def _state(**data):
    return ThreadState.model_validate(data)


class TestThreadStateLayouts:
    """Tests for the layout lookup table."""

    def test_list_flavors(self):
        """Test that both Apple flavors are registered."""
        assert ThreadStateLayouts.list_flavors() == ["ARM_THREAD_STATE64", "x86_THREAD_STATE"]

    def test_is_supported(self):
        """Test flavor support checks."""
        assert ThreadStateLayouts.is_supported("ARM_THREAD_STATE64")
        assert not ThreadStateLayouts.is_supported("PPC_THREAD_STATE")
        assert not ThreadStateLayouts.is_supported(None)

    def test_unknown_flavor_falls_back(self):
        """Test that unknown flavors get the generic layout."""
        layout = ThreadStateLayouts.get_layout("PPC_THREAD_STATE")
        assert layout is ThreadStateLayouts.UNKNOWN
        assert layout.title == "Register State"
        assert layout.registers == ()

    def test_layout_titles(self):
        """Test the titles printed for each flavor."""
        assert ThreadStateLayouts.get_layout("ARM_THREAD_STATE64").title == "ARM Thread State (64-bit)"
        assert ThreadStateLayouts.get_layout("x86_THREAD_STATE").title == "X86 Thread State (64-bit)"


class TestRegisterRows:
    """Tests for register_rows()."""

    def test_arm_presence_filter_keeps_layout_order(self):
        """Test that only present registers appear, in canonical order."""
        state = _state(flavor="ARM_THREAD_STATE64", pc={"value": 2}, sp={"value": 1})
        rows = register_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert [row.name for row in rows] == ["sp", "pc"]
        assert [row.value for row in rows] == [1, 2]

    def test_arm_full_layout(self):
        """Test the x list followed by the named registers."""
        state = _state(
            flavor="ARM_THREAD_STATE64",
            x=[{"value": 10}, {"value": 11}, {"value": 12}],
            esr={"value": 5}, far={"value": 4}, cpsr={"value": 3},
            pc={"value": 2}, sp={"value": 1}, lr={"value": 6}, fp={"value": 7},
        )
        rows = register_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert [row.name for row in rows] == [
            "x0", "x1", "x2", "fp", "lr", "sp", "pc", "cpsr", "far", "esr",
        ]

    def test_arm_narrow_registers(self):
        """Test that cpsr and esr are printed as 32-bit values."""
        state = _state(flavor="ARM_THREAD_STATE64", cpsr={"value": 0x60001000}, pc={"value": 1})
        rows = {row.name: row for row in register_rows(state, ThreadStateLayouts.get_layout(state.flavor))}
        assert rows["cpsr"].formatted_value == "0x60001000"
        assert rows["pc"].formatted_value == "0x0000000000000001"

    def test_zero_value_register_is_present(self):
        """Test that a register holding 0 is not dropped."""
        state = _state(flavor="ARM_THREAD_STATE64", far={"value": 0}, x=[{"value": 0}])
        rows = register_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert [(row.name, row.value) for row in rows] == [("x0", 0), ("far", 0)]

    def test_descriptions_carried(self):
        """Test that register descriptions are kept."""
        state = _state(flavor="ARM_THREAD_STATE64", pc={"value": 1, "description": " main + 4"})
        rows = register_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert rows[0].description == " main + 4"

    def test_x86_renames_rflags(self):
        """Test that rflags is displayed as rfl."""
        state = _state(flavor="x86_THREAD_STATE", rip={"value": 1}, rflags={"value": 2}, rax={"value": 0})
        rows = register_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert [row.name for row in rows] == ["rax", "rip", "rfl"]

    def test_x86_ignores_x_list(self):
        """Test that the indexed list is only read for layouts that use it."""
        state = _state(flavor="x86_THREAD_STATE", x=[{"value": 1}])
        assert register_rows(state, ThreadStateLayouts.get_layout(state.flavor)) == ()

    def test_non_object_register_ignored(self):
        """Test that a register key holding a bare number is not treated as a register."""
        state = _state(flavor="ARM_THREAD_STATE64", pc=5)
        assert register_rows(state, ThreadStateLayouts.get_layout(state.flavor)) == ()


class TestExtrasAndState:
    """Tests for extra_rows() and build_register_state()."""

    def test_x86_extras(self):
        """Test the CPU, error code and trap rows."""
        state = _state(flavor="x86_THREAD_STATE", cpu={"value": 3}, err={"value": 4}, trap={"value": 14})
        rows = extra_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert [(row.label, row.value) for row in rows] == [
            ("Logical CPU", "3"),
            ("Error Code", "0x00000004"),
            ("Trap Number", "14"),
        ]

    def test_hex_extras_are_address_spans(self):
        """Test that hex-formatted extras are highlighted like addresses."""
        state = _state(flavor="x86_THREAD_STATE", err={"value": 4}, cpu={"value": 3})
        cpu, err = extra_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert err.spans == (Span("0x00000004", SpanStyle.ADDRESS),)
        assert cpu.spans == (Span("3", SpanStyle.NUMBER),)

    def test_extras_with_description(self):
        """Test that extra descriptions follow the value."""
        state = _state(flavor="x86_THREAD_STATE", trap={"value": 14, "description": "(no mapping for user data write)"})
        rows = extra_rows(state, ThreadStateLayouts.get_layout(state.flavor))
        assert rows[0].value == "14 (no mapping for user data write)"

    def test_build_register_state(self):
        """Test the assembled register state."""
        state = _state(flavor="ARM_THREAD_STATE64", pc={"value": 1})
        result = build_register_state(state, 0)
        assert result.title == "ARM Thread State (64-bit)"
        assert result.thread_id == 0
        assert result.flavor == "ARM_THREAD_STATE64"
        assert len(result.registers) == 1
        assert result.extras == ()

    def test_build_register_state_unknown_flavor(self):
        """Test that unknown flavors produce an empty generic state."""
        state = _state(flavor="PPC_THREAD_STATE", r0={"value": 1})
        result = build_register_state(state, 2)
        assert result.title == "Register State"
        assert result.registers == ()
