"""
Pydantic models for decoded .ips crash reports.

Field names are snake_case; the JSON keys Apple uses are kept as aliases.
Validation is best-effort: a value of the wrong JSON type (or ``null``)
falls back to the field default instead of failing the decode, and each
model keeps the object it was decoded from so ``to_json_dict()`` returns
the payload unchanged. Unknown keys are preserved as extras.
"""

import copy
from typing import Optional, List, Dict, Any, Union
from pydantic import BaseModel, Field, PrivateAttr, ValidationError, field_validator, model_validator


class IpsModel(BaseModel):
    """Base model: immutable, tolerant of unknown keys and mistyped values."""

    class Config:
        extra = "allow"
        frozen = True
        populate_by_name = True

    _payload: Optional[Dict[str, Any]] = PrivateAttr(default=None)

    @field_validator("*", mode="wrap")
    @classmethod
    def _default_on_mismatch(cls, value, handler, info):
        try:
            return handler(value)
        except ValidationError:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_payload(cls, data, handler):
        model = handler(data)
        if isinstance(data, dict):
            model._payload = copy.deepcopy(data)
        return model

    def to_json_dict(self) -> Dict[str, Any]:
        """Return the JSON object the model was decoded from."""
        if self._payload is not None:
            return copy.deepcopy(self._payload)
        return self.model_dump(by_alias=True, exclude_unset=True)


# ============================================================================
# Container metadata (line 1)
# ============================================================================

class Metadata(IpsModel):
    """First line of an .ips file. Only ``bug_type`` is inspected."""
    bug_type: Any = None
    incident_id: Optional[str] = None


# ============================================================================
# Images, frames and thread state
# ============================================================================

class BinaryImage(IpsModel):
    """Entry of ``usedImages``. ``size == 0`` marks a placeholder."""
    base: int = 0
    size: Optional[int] = None
    name: Optional[str] = None
    path: Optional[str] = None
    arch: Optional[str] = None
    uuid: Optional[str] = None
    source: Optional[str] = None

    @property
    def is_placeholder(self) -> bool:
        return self.size == 0


class Frame(IpsModel):
    image_index: int = Field(0, alias="imageIndex")
    image_offset: int = Field(0, alias="imageOffset")
    symbol: Optional[str] = None
    symbol_location: Optional[int] = Field(None, alias="symbolLocation")


class RegisterValue(IpsModel):
    value: int = 0
    description: Optional[str] = None


class ThreadState(IpsModel):
    """
    Register dump of the crashed thread.

    ``flavor`` selects the layout (see ``registers.py``). ARM general purpose
    registers come as the ``x`` list; every other register is a top-level
    key holding ``{"value": ..., "description": ...}`` and is kept as an
    extra field.
    """
    flavor: Optional[str] = None
    x: Optional[List[RegisterValue]] = None

    def has_register(self, name: str) -> bool:
        return isinstance((self.model_extra or {}).get(name), dict)

    def register(self, name: str) -> Optional[RegisterValue]:
        """Return a named register, or None when the input does not carry it."""
        raw = (self.model_extra or {}).get(name)
        if not isinstance(raw, dict):
            return None
        value = raw.get("value", 0)
        description = raw.get("description")
        return RegisterValue(
            value=value if isinstance(value, int) else 0,
            description=description if isinstance(description, str) else None,
        )


class Thread(IpsModel):
    id: Optional[int] = None
    name: Optional[str] = None
    queue: Optional[str] = None
    triggered: bool = False
    frames: List[Frame] = Field(default_factory=list)
    thread_state: Optional[ThreadState] = Field(None, alias="threadState")


# ============================================================================
# Exception / termination
# ============================================================================

class ExceptionInfo(IpsModel):
    type: Optional[str] = None
    signal: Optional[str] = None
    subtype: Optional[str] = None
    codes: Optional[str] = None
    message: Optional[str] = None


class Termination(IpsModel):
    namespace: Optional[str] = None
    code: Optional[Union[int, str]] = None
    indicator: Optional[str] = None
    by_proc: Optional[str] = Field(None, alias="byProc")
    by_pid: Optional[int] = Field(None, alias="byPid")


class InstructionByteStream(IpsModel):
    before_pc: Optional[str] = Field(None, alias="beforePC")
    at_pc: Optional[str] = Field(None, alias="atPC")


# ============================================================================
# Process / OS identity blocks
# ============================================================================

class BundleInfo(IpsModel):
    bundle_identifier: Optional[str] = Field(None, alias="CFBundleIdentifier")
    short_version: Optional[str] = Field(None, alias="CFBundleShortVersionString")
    bundle_version: Optional[str] = Field(None, alias="CFBundleVersion")
    app_store_tools_build: Optional[str] = Field(None, alias="DTAppStoreToolsBuild")


class BuildInfo(IpsModel):
    project_name: Optional[str] = Field(None, alias="ProjectName")
    source_version: Optional[str] = Field(None, alias="SourceVersion")
    build_version: Optional[str] = Field(None, alias="BuildVersion")


class StoreInfo(IpsModel):
    application_variant: Optional[str] = Field(None, alias="applicationVariant")
    device_identifier_for_vendor: Optional[str] = Field(None, alias="deviceIdentifierForVendor")


class OSVersion(IpsModel):
    train: Optional[str] = None
    build: Optional[str] = None
    release_type: Optional[str] = Field(None, alias="releaseType")


class AppleIntelligenceStatus(IpsModel):
    state: Optional[str] = None
    reasons: Optional[List[str]] = None


# ============================================================================
# External modification summary
# ============================================================================

class CallCounts(IpsModel):
    task_for_pid: Optional[int] = None
    thread_create: Optional[int] = None
    thread_set_state: Optional[int] = None


class ExtMods(IpsModel):
    targeted: Optional[CallCounts] = None
    caller: Optional[CallCounts] = None
    system: Optional[CallCounts] = None
    warnings: Optional[int] = None


# ============================================================================
# Report payload (lines 2..N)
# ============================================================================

class Report(IpsModel):
    """Crash report payload. Every field is optional."""

    # Process identity
    proc_name: Optional[str] = Field(None, alias="procName")
    pid: Optional[int] = None
    proc_path: Optional[str] = Field(None, alias="procPath")
    proc_role: Optional[str] = Field(None, alias="procRole")
    bundle_info: Optional[BundleInfo] = Field(None, alias="bundleInfo")
    build_info: Optional[BuildInfo] = Field(None, alias="buildInfo")
    store_info: Optional[StoreInfo] = Field(None, alias="storeInfo")
    user_id: Optional[int] = Field(None, alias="userID")

    # Related processes
    parent_proc: Optional[str] = Field(None, alias="parentProc")
    parent_pid: Optional[int] = Field(None, alias="parentPid")
    coalition_name: Optional[str] = Field(None, alias="coalitionName")
    coalition_id: Optional[int] = Field(None, alias="coalitionID")
    responsible_proc: Optional[str] = Field(None, alias="responsibleProc")
    responsible_pid: Optional[int] = Field(None, alias="responsiblePid")

    # OS / hardware
    cpu_type: Optional[str] = Field(None, alias="cpuType")
    translated: Optional[bool] = None
    hardware_model: Optional[str] = Field(None, alias="modelCode")
    code_name: Optional[str] = Field(None, alias="codeName")
    os_version: Optional[OSVersion] = Field(None, alias="osVersion")
    baseband_version: Optional[str] = Field(None, alias="basebandVersion")

    # Time
    capture_time: Optional[str] = Field(None, alias="captureTime")
    proc_launch: Optional[str] = Field(None, alias="procLaunch")
    proc_start_abs_time: Optional[int] = Field(None, alias="procStartAbsTime")
    proc_exit_abs_time: Optional[int] = Field(None, alias="procExitAbsTime")
    uptime: Optional[int] = None
    wake_time: Optional[int] = Field(None, alias="wakeTime")

    # Identifiers
    incident: Optional[str] = None
    crash_reporter_key: Optional[str] = Field(None, alias="crashReporterKey")
    system_id: Optional[str] = Field(None, alias="systemID")
    boot_session_uuid: Optional[str] = Field(None, alias="bootSessionUUID")
    sleep_wake_uuid: Optional[str] = Field(None, alias="sleepWakeUUID")

    # Flags
    is_beta: Optional[bool] = Field(None, alias="isBeta")
    sip: Optional[str] = None
    developer_mode: Optional[bool] = Field(None, alias="developerMode")
    apple_intelligence_status: Optional[AppleIntelligenceStatus] = Field(None, alias="appleIntelligenceStatus")
    deploy_version: Optional[int] = Field(None, alias="deployVersion")
    throttle_timeout: Optional[int] = Field(None, alias="throttleTimeout")
    code_signing_monitor: Optional[int] = Field(None, alias="codeSigningMonitor")
    code_signing_id: Optional[str] = Field(None, alias="codeSigningID")
    code_signing_team_id: Optional[str] = Field(None, alias="codeSigningTeamID")
    code_signing_flags: Optional[int] = Field(None, alias="codeSigningFlags")
    code_signing_validation_category: Optional[int] = Field(None, alias="codeSigningValidationCategory")
    code_signing_trust_level: Optional[int] = Field(None, alias="codeSigningTrustLevel")
    code_signing_auxiliary_info: Optional[int] = Field(None, alias="codeSigningAuxiliaryInfo")
    boot_progress_register: Optional[Union[int, str]] = Field(None, alias="bootProgressRegister")
    was_unlocked_since_boot: Optional[bool] = Field(None, alias="wasUnlockedSinceBoot")
    is_locked: Optional[bool] = Field(None, alias="isLocked")

    # Crash
    exception: Optional[ExceptionInfo] = None
    termination: Optional[Termination] = None
    faulting_thread: Optional[int] = Field(None, alias="faultingThread")
    vm_region_info: Optional[str] = Field(None, alias="vmRegionInfo")
    instruction_byte_stream: Optional[InstructionByteStream] = Field(None, alias="instructionByteStream")

    # Listings
    used_images: List[BinaryImage] = Field(default_factory=list, alias="usedImages")
    threads: List[Thread] = Field(default_factory=list)
    last_exception_backtrace: Optional[List[Frame]] = Field(None, alias="lastExceptionBacktrace")
    asi: Optional[Dict[str, Any]] = None
    ext_mods: Optional[ExtMods] = Field(None, alias="extMods")
    vm_summary: Optional[str] = Field(None, alias="vmSummary")
    filtered_log: Optional[List[str]] = Field(None, alias="filteredLog")

    def image_at(self, index: int) -> Optional[BinaryImage]:
        """Return ``usedImages[index]``; None when out of range or negative."""
        if 0 <= index < len(self.used_images):
            return self.used_images[index]
        return None

    def triggered_thread(self) -> Optional[Thread]:
        """First thread flagged ``triggered``."""
        for thread in self.threads:
            if thread.triggered:
                return thread
        return None
