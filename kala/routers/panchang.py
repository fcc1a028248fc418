"""Panchang element endpoints."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from ..schemas import ElementsRequest, ElementsResponse
from ..services.ephem import ENGINE_VERSION, oracle_factory
from ..services.panchang import compute_elements, elements_payload
from ..services.place_defaults import normalize_place, place_location, resolve_tz
from ..services.timebase import parse_local


router = APIRouter(prefix="/v1/panchang", tags=["panchang"])


@router.post(
    "/elements",
    response_model=ElementsResponse,
    summary="Current tithi, nakshatra, yoga, karana and vara with their validity intervals",
)
def panchang_elements(req: ElementsRequest, make_oracle: Callable = Depends(oracle_factory)):
    place, flags = normalize_place(req.place.model_dump() if req.place else None)
    try:
        tz = resolve_tz(place["tz"])
        moment = parse_local(req.datetime, tz) if req.datetime else datetime.now(timezone.utc)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    results = compute_elements(moment, make_oracle(ayanamsha=req.options.ayanamsha), place_location(place))
    payload = elements_payload(results)
    # element spans are reported in the caller's timezone
    for entry in payload.values():
        for key in ("start_ts", "end_ts"):
            if entry.get(key):
                entry[key] = datetime.fromisoformat(entry[key]).astimezone(tz).isoformat()

    return ElementsResponse(
        meta={
            "datetime_utc": moment.isoformat(),
            "tz": place["tz"],
            "place": place,
            "ayanamsha": req.options.ayanamsha,
            "engine_version": ENGINE_VERSION,
            **flags,
        },
        elements=payload,
    )
