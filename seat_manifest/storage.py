from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .engine import GenerateRequest
from .errors import SeatManifestError
from .models import Manifest


def load_json(path: str | Path) -> Any:
    p = Path(path)
    if not p.exists():
        raise SeatManifestError(f"file not found: {p}")

    try:
        return json.loads(p.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise SeatManifestError(f"failed to read JSON from {p}: {e}") from e


def save_json(data: Any, path: str | Path) -> None:
    p = Path(path)
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(json.dumps(data, indent=2, sort_keys=True, ensure_ascii=False) + "\n", encoding="utf-8")


def load_manifest(path: str | Path) -> Manifest:
    """
    Read a manifest file. Accepts either a bare manifest or the output of
    `generate` (a document with a top-level "manifest" key).
    """
    data = load_json(path)
    if isinstance(data, dict) and isinstance(data.get("manifest"), dict):
        data = data["manifest"]
    try:
        return Manifest.model_validate(data)
    except ValidationError as e:
        raise SeatManifestError(f"invalid manifest in {path}: {e}") from e


def load_request(path: str | Path) -> GenerateRequest:
    try:
        return GenerateRequest.model_validate(load_json(path))
    except ValidationError as e:
        raise SeatManifestError(f"invalid generate request in {path}: {e}") from e
