"""pybnd - minimal self-extracting packager for Python scripts."""

__version__ = "0.1.0"
