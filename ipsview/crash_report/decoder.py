"""
IPS Container Decoder

Decodes the two-part .ips format: a metadata JSON object on the first line,
followed by the crash report JSON object spread over the remaining lines.

    {"bug_type":"309","timestamp":"2024-01-01 12:00:00.00 +0000",...}
    {
      "procName" : "MyApp",
      "threads" : [...],
      ...
    }
"""

import json
import logging
from typing import Any, Dict, Tuple


from ipsview.errors import FormatError
from .models import Metadata, Report


logger = logging.getLogger("ipsview.crash_report.decoder")

CRASH_REPORT_BUG_TYPE = "309"


def _load_object(text: str, what: str, phase: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise FormatError(f"invalid {what} JSON: {e}", phase=phase) from e
    if not isinstance(data, dict):
        raise FormatError(
            f"invalid {what} JSON: expected an object, got {type(data).__name__}",
            phase=phase,
        )
    return data


def decode(raw: str) -> Tuple[Metadata, Report]:
    """
    Decode the contents of an .ips file.

    Args:
        raw: Full file contents

    Returns:
        (Metadata, Report) tuple

    Raises:
        FormatError: with ``phase`` set to ``container``, ``metadata``,
            ``report`` or ``bug_type`` depending on which step failed
    """
    lines = raw.strip().split("\n")
    if len(lines) < 2:
        raise FormatError(
            f"Invalid IPS file format: expected at least 2 lines (metadata + report), got {len(lines)}",
            phase="container",
        )

    meta_data = _load_object(lines[0], "metadata", "metadata")
    report_data = _load_object("\n".join(lines[1:]), "report", "report")

    # Field types are best-effort: mismatches fall back to defaults
    metadata = Metadata.model_validate(meta_data)
    report = Report.model_validate(report_data)

    if metadata.bug_type != CRASH_REPORT_BUG_TYPE:
        raise FormatError(
            f"unexpected bug_type {metadata.bug_type!r}: expected \"{CRASH_REPORT_BUG_TYPE}\" (not a crash report)",
            phase="bug_type",
        )

    logger.debug(
        f"Decoded crash report for {report.proc_name or 'unknown process'}: "
        f"{len(report.threads)} threads, {len(report.used_images)} images"
    )
    return metadata, report


def decode_file(path: str) -> Tuple[Metadata, Report]:
    """
    Read a UTF-8 .ips file and decode it.

    Read failures propagate as ``OSError`` or ``UnicodeDecodeError`` so
    callers can tell them apart from a ``FormatError``.
    """
    with open(path, "r", encoding="utf-8") as f:
        content = f.read()
    logger.debug(f"Read {len(content)} characters from {path}")
    return decode(content)
