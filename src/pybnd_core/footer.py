"""Footer codec and payload-boundary arithmetic.

An image is ``stub ++ payload ++ footer`` where the footer is the fixed
13-byte trailer ``b"PYBND" ++ u64le(payload_size)``.
"""
from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from .errors import BundleIOError, FormatError, NoPayloadError
from .protocol import FOOTER_FMT, FOOTER_LEN, FOOTER_MAGIC, MAX_PAYLOAD_SIZE


@dataclass(frozen=True, slots=True)
class PayloadSpan:
    """Location of an embedded payload inside an image.

    :ivar file_size: Total image size in bytes.
    :ivar payload_start: Absolute offset of the first payload byte.
    :ivar payload_size: Payload length as declared by the footer.
    """

    file_size: int
    payload_start: int
    payload_size: int

    @property
    def stub_size(self) -> int:
        return self.payload_start

    def as_dict(self) -> dict:
        return {
            "file_size": self.file_size,
            "stub_size": self.stub_size,
            "payload_start": self.payload_start,
            "payload_size": self.payload_size,
        }


def encode_footer(payload_size: int) -> bytes:
    """Encode the trailer for a payload of ``payload_size`` bytes."""
    if not 0 <= payload_size <= MAX_PAYLOAD_SIZE:
        raise ValueError(f"payload size out of range: {payload_size}")
    return struct.pack(FOOTER_FMT, FOOTER_MAGIC, payload_size)


def decode_footer(data: bytes) -> tuple[bool, int]:
    """Decode the trailing ``FOOTER_LEN`` bytes of an image.

    Returns ``(False, 0)`` when the magic does not match; that is the normal
    state of a bare stub, not an error. A matching magic with a zero size is
    a format error since an empty payload is never valid.
    """
    if len(data) != FOOTER_LEN:
        raise FormatError("E_FOOTER_UNREADABLE", f"expected {FOOTER_LEN} bytes, got {len(data)}")

    magic, payload_size = struct.unpack(FOOTER_FMT, data)
    if magic != FOOTER_MAGIC:
        return False, 0
    if payload_size == 0:
        raise FormatError("E_EMPTY_PAYLOAD")
    return True, int(payload_size)


def span_from_file(f: BinaryIO, where: str = "<stream>") -> PayloadSpan:
    """Locate the payload of an already opened, seekable image."""
    try:
        file_size = f.seek(0, os.SEEK_END)
    except OSError as e:
        raise BundleIOError("E_SELF_UNREADABLE", f"{where}: {e}") from e

    if file_size < FOOTER_LEN:
        raise FormatError("E_TOO_SMALL", f"{where} is {file_size} bytes")

    try:
        f.seek(file_size - FOOTER_LEN)
        trailer = f.read(FOOTER_LEN)
    except OSError as e:
        raise FormatError("E_FOOTER_UNREADABLE", f"{where}: {e}") from e

    valid, payload_size = decode_footer(trailer)
    if not valid:
        raise NoPayloadError(detail=where)

    # Strict offset math: payload sits immediately before the footer.
    payload_start = file_size - FOOTER_LEN - payload_size
    if payload_start < 0:
        raise FormatError(
            "E_CORRUPT_FOOTER",
            f"{where}: footer claims {payload_size} bytes but only "
            f"{file_size - FOOTER_LEN} precede it",
        )

    return PayloadSpan(file_size=file_size, payload_start=payload_start, payload_size=payload_size)


def read_span(path: Path) -> PayloadSpan:
    """Open ``path`` and locate its embedded payload."""
    try:
        f = open(path, "rb")
    except OSError as e:
        raise BundleIOError("E_SELF_UNREADABLE", f"{path}: {e}") from e
    with f:
        return span_from_file(f, str(path))


def has_payload(path: Path) -> bool:
    """True when ``path`` ends in a footer with a matching magic."""
    try:
        read_span(path)
    except NoPayloadError:
        return False
    except FormatError as e:
        # Magic matched but the size is unusable: still payload-bearing.
        if e.code in ("E_EMPTY_PAYLOAD", "E_CORRUPT_FOOTER"):
            return True
        if e.code == "E_TOO_SMALL":
            return False
        raise
    return True
