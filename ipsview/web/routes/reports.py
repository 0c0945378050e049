"""Report decoding API endpoints"""

import logging
from typing import Any, Dict, Literal

from fastapi import APIRouter
from pydantic import BaseModel, Field

from ipsview.crash_report import decode, build_sections
from ipsview.renderers import render

router = APIRouter()
logger = logging.getLogger("ipsview.web.reports")


class ReportRequest(BaseModel):
    """Raw .ips contents submitted for decoding."""
    content: str = Field(..., description="Full .ips file contents (metadata line + report)")


class RenderRequest(ReportRequest):
    """Raw .ips contents plus the output format to render."""
    format: Literal["text", "html"] = Field("text", description="Output format")
    compact_uuids: bool = Field(False, description="Strip hyphens from binary image UUIDs")


@router.post("/sections", response_model=Dict[str, Any])
async def report_sections(request: ReportRequest):
    """
    Decode a report and return its sections.

    Returns:
        Ordered list of section dicts (title, collapse hint, typed rows)

    A malformed container is answered with HTTP 400 by the FormatError
    handler registered on the app.
    """
    metadata, report = decode(request.content)
    sections = build_sections(report, metadata)
    logger.info(f"Decoded report for {report.proc_name or 'unknown process'}: {len(sections)} sections")
    return {
        "success": True,
        "count": len(sections),
        "data": [section.to_dict() for section in sections],
    }


@router.post("/render", response_model=Dict[str, Any])
async def render_report(request: RenderRequest):
    """
    Decode a report and render it as text or HTML.

    Returns:
        Rendered report in ``data``
    """
    metadata, report = decode(request.content)
    sections = build_sections(report, metadata)
    output = render(sections, request.format, compact_uuids=request.compact_uuids)
    return {
        "success": True,
        "format": request.format,
        "data": output,
    }
