"""pybnd launcher - extract and run an appended payload."""
from .executor import header_length, load_code, run_pyc
from .extract import extract_and_run, extract_payload
from .logic import inspect_image

__all__ = ["extract_and_run", "extract_payload", "header_length", "inspect_image", "load_code", "run_pyc"]
