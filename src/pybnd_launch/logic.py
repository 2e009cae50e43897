import importlib.util
from pathlib import Path
from pybnd_core.const import EXIT_CODES
from pybnd_core.errors import BundleError, ExecError
from pybnd_core.footer import read_span
from .executor import header_length

def _fail(path: Path, err: BundleError) -> dict:
    return {"status":"FAIL","file":str(path),"error_count":1,"errors":[err.as_dict()]}

def inspect_image(path: Path) -> dict:
    try:
        span = read_span(path)
    except BundleError as e:
        return _fail(path, e)

    # Only the payload's version tag is read; nothing is executed.
    with open(path, "rb") as f:
        f.seek(span.payload_start)
        magic = f.read(min(4, span.payload_size))

    try:
        hlen = header_length(magic)
    except ExecError as e:
        return _fail(path, e)

    report = {"status":"PASS","file":str(path),"error_count":0,"errors":[]}
    report.update(span.as_dict())
    report["payload_magic"] = magic.hex()
    report["payload_header_len"] = hlen
    report["payload_runnable"] = magic == importlib.util.MAGIC_NUMBER
    return report

def exit_code_for(report: dict) -> int:
    if report["status"] == "PASS":
        return 0
    return EXIT_CODES[report["errors"][0]["code"]]
