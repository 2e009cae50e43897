ERRORS = {
  "E_USAGE": "Invalid invocation",
  "E_SELF_PATH": "Cannot determine path of the running executable",
  "E_SELF_UNREADABLE": "Cannot read executable image",
  "E_TOO_SMALL": "File too small to hold a footer",
  "E_FOOTER_UNREADABLE": "Cannot read footer",
  "E_NO_PAYLOAD": "No embedded payload found in binary",
  "E_EMPTY_PAYLOAD": "Embedded payload size is zero",
  "E_CORRUPT_FOOTER": "Corrupt footer: payload extends before start of file",
  "E_SCRATCH_CREATE": "Cannot create scratch payload file",
  "E_COMPILE": "Script failed to compile",
  "E_APPEND": "Failed to write output executable",
  "E_EXEC": "Embedded payload failed during execution",
  "E_NESTED_BUILD": "Stub already carries a payload; build from a bare stub",
}

# Stable process exit codes. Never renumber; tooling depends on them.
EXIT_CODES = {
  "E_USAGE": 1,
  "E_SELF_PATH": 2,
  "E_SELF_UNREADABLE": 3,
  "E_TOO_SMALL": 4,
  "E_FOOTER_UNREADABLE": 5,
  "E_NO_PAYLOAD": 6,
  "E_EMPTY_PAYLOAD": 7,
  "E_CORRUPT_FOOTER": 8,
  "E_SCRATCH_CREATE": 9,
  "E_COMPILE": 10,
  "E_APPEND": 11,
  "E_EXEC": 12,
  "E_NESTED_BUILD": 13,
}
