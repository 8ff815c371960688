"""Progress reporting, prompts, line splitting and scan suggestions for container tooling."""

__version__ = "0.1.0"

__all__ = [
    "events",
    "linewriter",
    "prompt",
    "scan_suggest",
    "spinner",
    "stringutils",
    "writers",
]