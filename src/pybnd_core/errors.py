"""pybnd error taxonomy.

Every failure surfaces as a :class:`BundleError` subclass carrying one of the
catalogue codes in :mod:`pybnd_core.const`. The dispatcher turns the code into
a process exit status.
"""
from __future__ import annotations

from .const import ERRORS, EXIT_CODES


class BundleError(Exception):
    """Base class for packaging failures."""

    default_code = "E_USAGE"

    def __init__(self, code: str | None = None, detail: str | None = None):
        self.code = code or self.default_code
        self.detail = detail
        message = ERRORS[self.code]
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)

    @property
    def exit_code(self) -> int:
        return EXIT_CODES[self.code]

    def as_dict(self) -> dict:
        out = {"code": self.code, "message": ERRORS[self.code]}
        if self.detail:
            out["detail"] = self.detail
        return out


class LocatorError(BundleError):
    """The running executable cannot be located."""

    default_code = "E_SELF_PATH"


class BundleIOError(BundleError):
    """Open/read/write/seek failure on a stub, payload, output or scratch file."""

    default_code = "E_APPEND"


class FormatError(BundleError):
    """Footer is missing, truncated or inconsistent with the file."""

    default_code = "E_CORRUPT_FOOTER"


class NoPayloadError(FormatError):
    """No footer magic: the file is a bare stub.

    This is the expected state of a freshly written stub, so it gets its own
    message rather than reading as corruption.
    """

    default_code = "E_NO_PAYLOAD"


class CompileError(BundleError):
    default_code = "E_COMPILE"


class ExecError(BundleError):
    default_code = "E_EXEC"
