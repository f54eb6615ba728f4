from __future__ import annotations

import re
import uuid
from pathlib import Path

from agv_rebrand.config import settings


_SAFE_NAME_PATTERN = re.compile(r"[^a-zA-Z0-9_-]+")


def _safe_name(name: str) -> str:
    cleaned = _SAFE_NAME_PATTERN.sub("_", name).strip("_")
    return cleaned or "unknown"


def public_root() -> Path:
    root = Path(settings.public_dir)
    root.mkdir(parents=True, exist_ok=True)
    return root


def save_generated_image(data: bytes, identifier: str, ext: str = "png") -> str:
    """Write ``data`` under the public dir and return the new file name."""
    new_name = f"{settings.output_prefix}_{_safe_name(identifier)}_{uuid.uuid4().hex}.{ext.lstrip('.').lower()}"
    destination = public_root() / new_name
    destination.write_bytes(data)
    return new_name


def public_url(base_url: str, filename: str) -> str:
    prefix = "/" + settings.public_url_prefix.strip("/")
    return f"{base_url.rstrip('/')}{prefix}/{filename}"
