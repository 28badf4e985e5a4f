"""Identifier helpers.

ID conventions:
- local file store keys: "uploaded_<epoch millis>_<random base36>"
- storage object names:  "<epoch millis>-<random base36>.<ext>"
"""

from __future__ import annotations

import secrets
import time

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def random_base36(length: int = 11) -> str:
    """Random lowercase base36 string."""
    return "".join(secrets.choice(_BASE36) for _ in range(length))


def epoch_millis() -> int:
    return int(time.time() * 1000)


def generate_file_id() -> str:
    """Key for a record in the local file store."""
    return f"uploaded_{epoch_millis()}_{random_base36()}"


def generate_object_name(filename: str) -> str:
    """Storage object name keeping the original file extension."""
    ext = filename.rsplit(".", 1)[-1] if "." in filename else "pdf"
    return f"{epoch_millis()}-{random_base36()}.{ext}"
