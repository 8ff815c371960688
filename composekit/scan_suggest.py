"""Suggest running an image scan after a successful build."""

from __future__ import annotations

import json
import os
import sys
from pathlib import Path
from typing import TextIO

SCAN_SUGGEST_MSG = (
    "Use 'docker scan' to run Snyk tests against images to find "
    "vulnerabilities and learn how to fix them"
)


def docker_config_dir() -> Path:
    """Return the client configuration directory."""
    configured = os.environ.get("DOCKER_CONFIG")
    if configured:
        return Path(configured)
    return Path.home() / ".docker"


def _optin_value(document: dict) -> object:
    if "optin" in document:
        return document["optin"]
    for key, value in document.items():
        if isinstance(key, str) and key.lower() == "optin":
            return value
    return None


def scan_already_invoked(config_dir: str | os.PathLike[str] | None = None) -> bool:
    """Tell whether the user has already opted in to scanning.

    Anything unexpected about the scan configuration counts as already
    invoked, so the user is not bothered with the suggestion.
    """
    base = Path(config_dir) if config_dir is not None else docker_config_dir()
    filename = base / "scan" / "config.json"
    try:
        if filename.is_dir():
            return True
        data = filename.read_bytes()
    except FileNotFoundError:
        return False
    except OSError:
        return True
    try:
        document = json.loads(data)
    except ValueError:
        return True
    if document is None:
        return False
    if not isinstance(document, dict):
        return True
    optin = _optin_value(document)
    if optin is None:
        return False
    if not isinstance(optin, bool):
        return True
    return optin


def display_scan_suggest_msg(
    available: bool,
    config_dir: str | os.PathLike[str] | None = None,
    stream: TextIO | None = None,
) -> bool:
    """Print the scan suggestion when appropriate; return whether it was shown.

    ``available`` tells whether the scan plugin is installed.
    """
    if os.environ.get("DOCKER_SCAN_SUGGEST") == "false":
        return False
    if not available:
        return False
    if scan_already_invoked(config_dir):
        return False
    out = stream if stream is not None else sys.stderr
    out.write("\n" + SCAN_SUGGEST_MSG + "\n")
    return True