"""pybnd core - footer protocol, error taxonomy and self-location."""
from .errors import (
    BundleError,
    BundleIOError,
    CompileError,
    ExecError,
    FormatError,
    LocatorError,
    NoPayloadError,
)
from .footer import PayloadSpan, decode_footer, encode_footer, has_payload, read_span
from .locator import resolve_self_path

__all__ = [
    "BundleError",
    "BundleIOError",
    "CompileError",
    "ExecError",
    "FormatError",
    "LocatorError",
    "NoPayloadError",
    "PayloadSpan",
    "decode_footer",
    "encode_footer",
    "has_payload",
    "read_span",
    "resolve_self_path",
]
