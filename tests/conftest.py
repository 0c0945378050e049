"""
Pytest configuration and fixtures for ipsview tests.
"""

import sys
import json
import copy
import pytest
from pathlib import Path

# Add project root to path for all imports
project_root = str(Path(__file__).parent.parent)
if project_root not in sys.path:
    sys.path.insert(0, project_root)


ARM_REPORT = {
    "procName": "MyApp",
    "pid": 4242,
    "procPath": "/Applications/MyApp.app/Contents/MacOS/MyApp",
    "bundleInfo": {
        "CFBundleIdentifier": "com.example.myapp",
        "CFBundleShortVersionString": "1.2.3",
        "CFBundleVersion": "45",
    },
    "cpuType": "ARM-64",
    "translated": False,
    "parentProc": "launchd",
    "parentPid": 1,
    "captureTime": "2024-03-01 10:15:30.1234 +0100",
    "osVersion": {"train": "macOS 14.3", "build": "23D56", "releaseType": "User"},
    "incident": "11111111-2222-3333-4444-555555555555",
    "uptime": 3600,
    "sip": "enabled",
    "exception": {
        "type": "EXC_BAD_ACCESS",
        "signal": "SIGSEGV",
        "subtype": "KERN_INVALID_ADDRESS at 0x0000000000000000",
        "codes": "0x0000000000000001, 0x0000000000000000",
    },
    "termination": {
        "namespace": "SIGNAL",
        "code": 11,
        "indicator": "Segmentation fault: 11",
        "byProc": "exc handler",
        "byPid": 4242,
    },
    "faultingThread": 0,
    "vmRegionInfo": "0 is not in any region.",
    "usedImages": [
        {
            "base": 0x100000000,
            "size": 0x4000,
            "name": "MyApp",
            "path": "/Applications/MyApp.app/Contents/MacOS/MyApp",
            "arch": "arm64",
            "uuid": "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee",
            "source": "P",
        },
        {
            "base": 0x180000000,
            "size": 0x10000,
            "name": "libsystem_kernel.dylib",
            "path": "/usr/lib/system/libsystem_kernel.dylib",
            "arch": "arm64e",
            "uuid": "12345678-9abc-def0-1234-56789abcdef0",
            "source": "P",
        },
        {"base": 0, "size": 0, "source": "A"},
    ],
    "threads": [
        {
            "id": 1001,
            "triggered": True,
            "queue": "com.apple.main-thread",
            "frames": [
                {"imageIndex": 0, "imageOffset": 0x1f30, "symbol": "crashy_function", "symbolLocation": 24},
                {"imageIndex": 1, "imageOffset": 0x44},
            ],
            "threadState": {
                "flavor": "ARM_THREAD_STATE64",
                "x": [{"value": 0}, {"value": 4096}],
                "fp": {"value": 6161234000},
                "lr": {"value": 4294975280},
                "sp": {"value": 6161233900},
                "pc": {"value": 4294975280, "description": " crashy_function + 24"},
                "cpsr": {"value": 1610616832},
                "far": {"value": 0},
                "esr": {"value": 2449473542, "description": " (Data Abort) byte read Translation fault"},
            },
        },
        {
            "id": 1002,
            "name": "worker",
            "frames": [
                {"imageIndex": 1, "imageOffset": 0x100, "symbol": "__workq_kernreturn", "symbolLocation": 8},
            ],
        },
    ],
}

X86_REPORT = {
    "procName": "LegacyTool",
    "pid": 77,
    "cpuType": "X86-64",
    "translated": True,
    "exception": {"type": "EXC_CRASH", "signal": "SIGABRT"},
    "faultingThread": 0,
    "usedImages": [
        {"base": 4096, "size": 8192, "name": "LegacyTool", "arch": "x86_64", "uuid": "0000-1111", "path": "/usr/local/bin/LegacyTool"},
    ],
    "threads": [
        {
            "id": 9,
            "triggered": True,
            "frames": [{"imageIndex": 0, "imageOffset": 16}],
            "threadState": {
                "flavor": "x86_THREAD_STATE",
                "rax": {"value": 0},
                "rbx": {"value": 1},
                "rip": {"value": 4112},
                "rflags": {"value": 582},
                "cpu": {"value": 3},
                "err": {"value": 4},
                "trap": {"value": 14},
            },
        },
    ],
}


def make_ips(report, metadata=None) -> str:
    """Build raw .ips text from a metadata dict and a report dict."""
    if metadata is None:
        metadata = {"bug_type": "309", "timestamp": "2024-03-01 10:15:31.00 +0100"}
    return json.dumps(metadata) + "\n" + json.dumps(report, indent=2)


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Point ~ at a temporary directory so config and logs never touch the real home."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    return home


@pytest.fixture
def arm_report_data():
    """Crash report payload of an arm64 process with a crashed main thread."""
    return copy.deepcopy(ARM_REPORT)


@pytest.fixture
def x86_report_data():
    """Crash report payload of a translated x86_64 process."""
    return copy.deepcopy(X86_REPORT)


@pytest.fixture
def arm_ips(arm_report_data):
    """Raw .ips text for the arm64 report."""
    return make_ips(arm_report_data)


@pytest.fixture
def x86_ips(x86_report_data):
    """Raw .ips text for the x86_64 report."""
    return make_ips(x86_report_data)


@pytest.fixture
def ips_file(tmp_path, arm_ips):
    """The arm64 report written to disk."""
    path = tmp_path / "MyApp-2024-03-01-101530.ips"
    path.write_text(arm_ips, encoding="utf-8")
    return path
