from __future__ import annotations

from typing import Any

from fastapi import Body, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import ValidationError

from seat_manifest.engine import GenerateRequest, generate
from seat_manifest.errors import SeatManifestError
from seat_manifest.manifest import compare_manifests, validate_manifest_structure
from seat_manifest.places import detect_sections, group_places_by_section, normalize_coordinates, parse_place_id

from .schemas import CompareRequest, NormalizeRequest, ParseRequest, PlacesRequest


app = FastAPI(title="Seat Manifest API", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"ok": True}


@app.post("/manifests/generate")
def generate_manifest(payload: GenerateRequest) -> dict:
    try:
        result = generate(payload)
    except (SeatManifestError, ValidationError) as e:
        raise HTTPException(status_code=400, detail=str(e)) from e
    return result.to_dict()


@app.post("/manifests/compare")
def compare(payload: CompareRequest) -> dict:
    return compare_manifests(payload.old, payload.new).to_dict()


@app.post("/manifests/validate")
def validate(payload: Any = Body(...)) -> dict:
    valid, errors = validate_manifest_structure(payload)
    return {"valid": valid, "errors": errors}


@app.post("/places/parse")
def parse(payload: ParseRequest) -> list[dict]:
    return [parse_place_id(p).to_dict() for p in payload.place_ids]


@app.post("/places/group")
def group(payload: PlacesRequest) -> dict:
    groups = detect_sections(payload.places) if payload.detect else group_places_by_section(payload.places)
    return {name: bucket.to_dict() for name, bucket in groups.items()}


@app.post("/places/normalize")
def normalize(payload: NormalizeRequest) -> list[dict]:
    return [p.model_dump(mode="json") for p in normalize_coordinates(payload.places, scale=payload.scale)]
