"""pybnd builder - compile a script and append it to a stub."""
from .append import BuildResult, append_payload, build
from .compiler import compile_script
from .stub import render_stub, write_stub

__all__ = ["BuildResult", "append_payload", "build", "compile_script", "render_stub", "write_stub"]
