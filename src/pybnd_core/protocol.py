"""pybnd protocol constants.

Single source of truth for the footer layout and the runtime knobs.
Keep this file stable. Builder and launcher must remain synchronized.
"""

# Footer: [Magic(5) | PayloadSize(8)] = 13 bytes, always the last bytes of an image
FOOTER_MAGIC = b"PYBND"
FOOTER_FMT = "<5sQ"
FOOTER_LEN = 13

MAX_PAYLOAD_SIZE = 2**64 - 1

# Stream copy buffer
CHUNK_SIZE = 64 * 1024  # 64KB

# Built images and launcher stubs
OUTPUT_MODE = 0o755

# Environment
SELF_ENV = "PYBND_SELF"  # exported by launcher stubs
TMPDIR_ENV = "PYBND_TMPDIR"  # scratch directory override

SCRATCH_BUILD_PREFIX = "pybnd-build-"
SCRATCH_PAYLOAD_PREFIX = "pybnd-payload-"
SCRATCH_SUFFIX = ".pyc"
