"""
ipsview error types.
"""


class IpsViewError(Exception):
    """Base class for all ipsview errors."""
    pass


class FormatError(IpsViewError):
    """
    Raised when an .ips container cannot be decoded.

    ``phase`` names the step that failed: ``container`` (too few lines),
    ``metadata`` (first line), ``report`` (payload) or ``bug_type``.
    """

    def __init__(self, message: str, phase: str):
        super().__init__(message)
        self.phase = phase


class IpsViewConfigError(IpsViewError):
    """Custom exception for ipsview configuration errors."""
    pass
