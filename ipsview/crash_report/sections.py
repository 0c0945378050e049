"""
Section Builder

Turns a decoded report into the ordered sections every renderer consumes:

    1. Process Information            (always)
    2. Exception Information          (always)
    3. Application Specific Information
    4. Last Exception Backtrace
    5. Threads                        (always)
    6. Binary Images                  (always)
    7. External Modification Summary
    8. VM Region Summary
    9. Filtered Log

The order matches the reading order of Apple's own .crash text. Building is
total: missing optional fields drop their row or section, they never raise.
"""

import logging
from typing import List, Optional, Tuple

from .models import CallCounts, Metadata, Report, Thread
from .registers import build_register_state
from .rows import (
    BlockRow, FieldRow, GroupRow, ImageRow, Row, Section, Span, ThreadBlock,
    number, text,
)
from .symbols import resolve_frames


logger = logging.getLogger("ipsview.crash_report.sections")

EXT_MOD_GROUPS = (
    ("targeted", "Targeted", "Calls made by other processes targeting this process"),
    ("caller", "Caller", "Calls made by this process"),
    ("system", "System", "Calls made by all processes on this machine"),
)

CALL_COUNTERS = ("task_for_pid", "thread_create", "thread_set_state")


def _yes_no(flag: bool) -> str:
    return "YES" if flag else "NO"


def _with_id(name: str, ident: Optional[int]) -> Tuple[Span, ...]:
    """``name [id]``, the id only when present"""
    if ident is None:
        return (text(name),)
    return (text(name), text(" ["), number(ident), text("]"))


class SectionBuilder:
    """
    Builds the section list for one report.

    The builder keeps no state besides its inputs, so building twice yields
    equal results.
    """

    def __init__(self, report: Report, metadata: Metadata):
        self.report = report
        self.metadata = metadata

    def build(self) -> Tuple[Section, ...]:
        report = self.report
        sections = [
            self._process_info(),
            self._exception_info(),
        ]

        if report.asi is not None:
            sections.append(self._application_specific_info())

        if report.last_exception_backtrace:
            sections.append(self._last_exception_backtrace())

        sections.append(self._threads())
        sections.append(self._binary_images())

        if report.ext_mods is not None:
            sections.append(self._external_modifications())

        if report.vm_summary is not None:
            sections.append(Section(
                key="vm_summary",
                title="VM Region Summary",
                collapsed=True,
                rows=(BlockRow(report.vm_summary),),
            ))

        if report.filtered_log:
            sections.append(Section(
                key="filtered_log",
                title="Filtered Log",
                collapsed=True,
                rows=(BlockRow("\n".join(report.filtered_log)),),
            ))

        logger.debug(f"Built {len(sections)} sections: {[s.key for s in sections]}")
        return tuple(sections)

    # ------------------------------------------------------------------
    # 1. Process information
    # ------------------------------------------------------------------

    def _process_info(self) -> Section:
        r = self.report
        bundle = r.bundle_info
        build = r.build_info
        store = r.store_info
        os_version = r.os_version
        rows: List[Row] = []

        def add(label: str, *spans: Span):
            rows.append(FieldRow(label, tuple(spans)))

        add("Process", text(r.proc_name or "Unknown"), text(" ["), number(r.pid or 0), text("]"))
        add("Path", text(r.proc_path or "Unknown"))
        add("Identifier", text((bundle and bundle.bundle_identifier) or "Unknown"))
        add("Version", text(
            f"{(bundle and bundle.short_version) or '?'} ({(bundle and bundle.bundle_version) or '?'})"
        ))

        if bundle and bundle.app_store_tools_build:
            add("AppStoreTools", text(bundle.app_store_tools_build))
        if store and store.application_variant:
            add("AppVariant", text(store.application_variant))
        if r.is_beta is not None:
            add("Beta", text(_yes_no(r.is_beta)))
        if build and build.project_name and build.source_version and build.build_version:
            add("Build Info", text(f"{build.project_name}-{build.source_version}~{build.build_version}"))

        add("Code Type", text(f"{r.cpu_type or 'Unknown'} ({'Translated' if r.translated else 'Native'})"))

        if r.proc_role:
            add("Role", text(r.proc_role))
        add("Parent Process", *_with_id(r.parent_proc or "Unknown", r.parent_pid))
        if r.coalition_name:
            add("Coalition", *_with_id(r.coalition_name, r.coalition_id))
        if r.responsible_proc:
            add("Responsible Process", *_with_id(r.responsible_proc, r.responsible_pid))
        if r.user_id is not None:
            add("User ID", number(r.user_id))

        add("Date/Time", text(r.capture_time or "Unknown"))
        if r.proc_launch:
            add("Launch Time", text(r.proc_launch))
        if r.proc_start_abs_time is not None:
            add("Process Start (Absolute)", number(r.proc_start_abs_time))
        if r.proc_exit_abs_time is not None:
            add("Process Exit (Absolute)", number(r.proc_exit_abs_time))
        if r.hardware_model:
            add("Hardware Model", text(r.hardware_model))
        if r.code_name:
            add("Device Model", text(r.code_name))

        add("OS Version", text(
            f"{(os_version and os_version.train) or 'Unknown'} ({(os_version and os_version.build) or 'Unknown'})"
        ))
        if os_version and os_version.release_type:
            add("Release Type", text(os_version.release_type))
        if r.baseband_version:
            add("Baseband Version", text(r.baseband_version))

        if store and store.device_identifier_for_vendor:
            add("Beta Identifier", text(store.device_identifier_for_vendor))
        if r.system_id:
            add("UDID", text(r.system_id))
        if r.crash_reporter_key:
            add("Crash Reporter Key", text(r.crash_reporter_key))
        add("Incident Identifier", text(r.incident or self.metadata.incident_id or "Unknown"))
        if r.boot_session_uuid:
            add("Boot Session UUID", text(r.boot_session_uuid))
        if r.sleep_wake_uuid:
            add("Sleep/Wake UUID", text(r.sleep_wake_uuid))

        if r.uptime is not None:
            add("Time Awake Since Boot", number(r.uptime), text(" seconds"))
        if r.wake_time is not None:
            add("Time Since Wake", number(r.wake_time), text(" seconds"))

        if r.sip is not None:
            add("System Integrity Protection", text(r.sip))
        if r.developer_mode is not None:
            add("Developer Mode", text("enabled" if r.developer_mode else "disabled"))
        if r.apple_intelligence_status is not None:
            status = r.apple_intelligence_status
            reasons = f" ({', '.join(status.reasons)})" if status.reasons else ""
            add("Apple Intelligence", text(f"{status.state or 'unknown'}{reasons}"))

        self._code_signing(add)

        return Section(key="process", title="Process Information", rows=tuple(rows))

    def _code_signing(self, add):
        r = self.report
        fields_set = r.model_fields_set

        if r.deploy_version is not None:
            add("Deploy Version", number(r.deploy_version))
        if r.throttle_timeout is not None:
            add("Throttle Timeout", number(r.throttle_timeout))
        if r.code_signing_monitor is not None:
            add("Code Signing Monitor", number(r.code_signing_monitor))
        # An empty or null signing ID is still reported
        if "code_signing_id" in fields_set:
            add("Code Signing ID", text(r.code_signing_id or "(none)"))
        if "code_signing_team_id" in fields_set:
            add("Code Signing Team ID", text(r.code_signing_team_id or "(none)"))
        if r.code_signing_flags is not None:
            add("Code Signing Flags", number(f"0x{r.code_signing_flags:x}"))
        if r.code_signing_validation_category is not None:
            add("Code Signing Validation", number(r.code_signing_validation_category))
        if r.code_signing_trust_level is not None:
            add("Code Signing Trust Level", number(r.code_signing_trust_level))
        if r.code_signing_auxiliary_info is not None:
            add("Code Signing Auxiliary", number(f"0x{r.code_signing_auxiliary_info:x}"))
        if r.boot_progress_register is not None:
            add("Boot Progress Register", text(r.boot_progress_register))
        if r.was_unlocked_since_boot is not None:
            add("Unlocked Since Boot", text(_yes_no(r.was_unlocked_since_boot)))
        if r.is_locked is not None:
            add("Currently Locked", text(_yes_no(r.is_locked)))

    # ------------------------------------------------------------------
    # 2. Exception information
    # ------------------------------------------------------------------

    def _exception_info(self) -> Section:
        r = self.report
        ex = r.exception
        term = r.termination
        rows: List[Row] = []

        ex_type = (ex and ex.type) or "Unknown"
        if ex and ex.signal:
            ex_type += f" ({ex.signal})"
        rows.append(FieldRow("Exception Type", (text(ex_type),)))

        if ex and ex.subtype is not None:
            rows.append(FieldRow("Exception Subtype", (text(ex.subtype),)))
        if ex and ex.codes is not None:
            rows.append(FieldRow("Exception Codes", (text(ex.codes),)))
        if ex and ex.message:
            rows.append(FieldRow("Exception Message", (text(ex.message),)))

        if term is not None:
            spans = [
                text(f"Namespace {term.namespace or 'Unknown'}, Code "),
                number(term.code or 0),
            ]
            if term.indicator:
                spans.append(text(f", {term.indicator}"))
            rows.append(FieldRow("Termination Reason", tuple(spans)))

            if term.by_proc:
                rows.append(FieldRow(
                    "Terminating Process",
                    (text(term.by_proc), text(" ["), number(term.by_pid or 0), text("]")),
                ))

        if r.vm_region_info:
            rows.append(BlockRow(r.vm_region_info, label="VM Region Info"))

        stream = r.instruction_byte_stream
        if stream is not None:
            if stream.before_pc:
                rows.append(FieldRow("Instruction Bytes Before PC", (text(stream.before_pc),)))
            if stream.at_pc:
                rows.append(FieldRow("Instruction Bytes At PC", (text(stream.at_pc),)))

        if r.faulting_thread is not None:
            rows.append(FieldRow("Triggered by Thread", (number(r.faulting_thread),)))

        return Section(key="exception", title="Exception Information", rows=tuple(rows))

    # ------------------------------------------------------------------
    # 3-4. ASI and last exception backtrace
    # ------------------------------------------------------------------

    def _application_specific_info(self) -> Section:
        rows = []
        for key, value in self.report.asi.items():
            if isinstance(value, list):
                for item in value:
                    rows.append(FieldRow(key, (text(item),)))
            else:
                rows.append(FieldRow(key, (text(value),)))
        return Section(key="asi", title="Application Specific Information", rows=tuple(rows))

    def _last_exception_backtrace(self) -> Section:
        frames = resolve_frames(self.report.last_exception_backtrace, self.report.used_images)
        return Section(
            key="last_exception_backtrace",
            title="Last Exception Backtrace",
            collapsed=True,
            rows=frames,
        )

    # ------------------------------------------------------------------
    # 5. Threads
    # ------------------------------------------------------------------

    def _threads(self) -> Section:
        r = self.report
        triggered = r.triggered_thread()
        blocks = tuple(self._thread_block(thread, thread is triggered) for thread in r.threads)
        return Section(key="threads", title="Threads", rows=blocks)

    def _thread_block(self, thread: Thread, is_faulting: bool) -> ThreadBlock:
        state = None
        if is_faulting and self.report.faulting_thread is not None and thread.thread_state is not None:
            state = build_register_state(thread.thread_state, self.report.faulting_thread)

        return ThreadBlock(
            thread_id=thread.id,
            name=thread.name,
            queue=thread.queue,
            crashed=thread.triggered,
            frames=resolve_frames(thread.frames, self.report.used_images),
            state=state,
        )

    # ------------------------------------------------------------------
    # 6. Binary images
    # ------------------------------------------------------------------

    def _binary_images(self) -> Section:
        rows = []
        for image in self.report.used_images:
            if image.is_placeholder:
                continue
            end = image.base + image.size - 1 if image.size else image.base
            rows.append(ImageRow(
                base=image.base,
                end=end,
                name=image.name or "???",
                arch=image.arch or "unknown-arch",
                uuid=image.uuid or "",
                path=image.path or "???",
            ))
        return Section(key="binary_images", title="Binary Images", collapsed=True, rows=tuple(rows))

    # ------------------------------------------------------------------
    # 7. External modifications
    # ------------------------------------------------------------------

    def _external_modifications(self) -> Section:
        ext_mods = self.report.ext_mods
        rows: List[Row] = []

        for key, label, title in EXT_MOD_GROUPS:
            counts: Optional[CallCounts] = getattr(ext_mods, key)
            if counts is None:
                continue
            counters = tuple(
                FieldRow(name, (number(getattr(counts, name)),))
                for name in CALL_COUNTERS
                if getattr(counts, name) is not None
            )
            rows.append(GroupRow(key=key, label=label, title=title, rows=counters))

        if ext_mods.warnings is not None:
            rows.append(FieldRow("Warnings", (number(ext_mods.warnings),)))

        return Section(
            key="external_modifications",
            title="External Modification Summary",
            collapsed=True,
            rows=tuple(rows),
        )


def build_sections(report: Report, metadata: Metadata) -> Tuple[Section, ...]:
    """Build the ordered, renderer-agnostic sections for a decoded report."""
    return SectionBuilder(report, metadata).build()
