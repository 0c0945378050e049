"""
Thread State Register Layouts

Maps a thread-state ``flavor`` to the ordered register list, display names
and title used when printing the crashed thread's registers. Supporting a new
architecture means adding one entry to ``ThreadStateLayouts.LAYOUTS``.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from .models import ThreadState
from .rows import FieldRow, RegisterRow, RegisterState, address, number, text


logger = logging.getLogger("ipsview.crash_report.registers")


@dataclass(frozen=True)
class RegisterSpec:
    """One named register in a layout"""
    key: str               # key in the threadState object
    display: str = ""      # name shown to the user (defaults to key)
    width: int = 16        # hex digits

    @property
    def display_name(self) -> str:
        return self.display or self.key


@dataclass(frozen=True)
class ExtraSpec:
    """Non-register value printed after the register grid"""
    key: str
    label: str
    hex_width: Optional[int] = None  # None prints the value in decimal


@dataclass(frozen=True)
class ThreadStateLayout:
    """Complete register layout for one thread-state flavor"""
    flavor: str
    title: str
    indexed_prefix: Optional[str] = None  # name prefix for the ``x`` list
    registers: Tuple[RegisterSpec, ...] = ()
    extras: Tuple[ExtraSpec, ...] = ()


def _specs(*names: str, narrow: Tuple[str, ...] = (), renamed: Dict[str, str] = None) -> Tuple[RegisterSpec, ...]:
    renamed = renamed or {}
    return tuple(
        RegisterSpec(key=name, display=renamed.get(name, ""), width=8 if name in narrow else 16)
        for name in names
    )


class ThreadStateLayouts:
    """
    Register layouts for the thread-state flavors Apple writes into .ips files.

    Unknown flavors fall back to ``UNKNOWN``: a generic title and no registers.
    """

    LAYOUTS: Dict[str, ThreadStateLayout] = {
        "ARM_THREAD_STATE64": ThreadStateLayout(
            flavor="ARM_THREAD_STATE64",
            title="ARM Thread State (64-bit)",
            indexed_prefix="x",
            registers=_specs("fp", "lr", "sp", "pc", "cpsr", "far", "esr",
                             narrow=("cpsr", "esr")),
        ),

        "x86_THREAD_STATE": ThreadStateLayout(
            flavor="x86_THREAD_STATE",
            title="X86 Thread State (64-bit)",
            registers=_specs("rax", "rbx", "rcx", "rdx", "rdi", "rsi", "rbp", "rsp",
                             "r8", "r9", "r10", "r11", "r12", "r13", "r14", "r15",
                             "rip", "rflags", "cr2",
                             renamed={"rflags": "rfl"}),
            extras=(
                ExtraSpec(key="cpu", label="Logical CPU"),
                ExtraSpec(key="err", label="Error Code", hex_width=8),
                ExtraSpec(key="trap", label="Trap Number"),
            ),
        ),
    }

    UNKNOWN = ThreadStateLayout(flavor="", title="Register State")

    @classmethod
    def get_layout(cls, flavor: Optional[str]) -> ThreadStateLayout:
        """Get layout by flavor, falling back to the generic layout"""
        if flavor in cls.LAYOUTS:
            return cls.LAYOUTS[flavor]
        logger.debug(f"No register layout for flavor {flavor!r}")
        return cls.UNKNOWN

    @classmethod
    def list_flavors(cls) -> List[str]:
        """List all supported flavor names"""
        return sorted(cls.LAYOUTS.keys())

    @classmethod
    def is_supported(cls, flavor: Optional[str]) -> bool:
        return flavor in cls.LAYOUTS


def register_rows(state: ThreadState, layout: ThreadStateLayout) -> Tuple[RegisterRow, ...]:
    """
    Registers present in ``state``, in layout order.

    A register is present when its key exists in the input. Zero values are
    kept; absent registers are left out rather than zero-filled.
    """
    rows = []

    if layout.indexed_prefix and state.x:
        for i, reg in enumerate(state.x):
            rows.append(RegisterRow(
                name=f"{layout.indexed_prefix}{i}",
                value=reg.value,
                description=reg.description,
            ))

    for spec in layout.registers:
        reg = state.register(spec.key)
        if reg is None:
            continue
        rows.append(RegisterRow(
            name=spec.display_name,
            value=reg.value,
            width=spec.width,
            description=reg.description,
        ))

    return tuple(rows)


def extra_rows(state: ThreadState, layout: ThreadStateLayout) -> Tuple[FieldRow, ...]:
    rows = []
    for spec in layout.extras:
        reg = state.register(spec.key)
        if reg is None:
            continue
        if spec.hex_width is not None:
            spans = [address(reg.value, spec.hex_width)]
        else:
            spans = [number(reg.value)]
        if reg.description:
            spans.append(text(f" {reg.description}"))
        rows.append(FieldRow(spec.label, tuple(spans)))
    return tuple(rows)


def build_register_state(state: ThreadState, thread_id: Optional[int]) -> RegisterState:
    """Lay out a thread state according to its flavor"""
    layout = ThreadStateLayouts.get_layout(state.flavor)
    return RegisterState(
        flavor=state.flavor,
        title=layout.title,
        thread_id=thread_id,
        registers=register_rows(state, layout),
        extras=extra_rows(state, layout),
    )
