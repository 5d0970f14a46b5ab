"""MindEase: PHQ-9 / GAD-7 scoring and clinical triage engine."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mindease")
except PackageNotFoundError:  # pragma: no cover
    __version__ = "0.0.0"
__all__ = ["__version__"]
