"""Daily muhurta and auspicious window search."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from ..schemas import MuhurtaDayRequest, MuhurtaDayResponse, MuhurtaSearchRequest, MuhurtaSearchResponse
from ..services.ephem import oracle_factory
from ..services.errors import DegenerateDay, OracleUnavailable
from ..services.muhurta import day_muhurta
from ..services.muhurta_search import search_muhurta
from ..services.place_defaults import normalize_place, place_location, resolve_tz
from ..services.timebase import parse_local


router = APIRouter(prefix="/v1/muhurta", tags=["muhurta"])


@router.post("/day", response_model=MuhurtaDayResponse)
def muhurta_day(req: MuhurtaDayRequest, make_oracle: Callable = Depends(oracle_factory)):
    place, flags = normalize_place(req.place.model_dump() if req.place else None)
    try:
        tz = resolve_tz(place["tz"])
        local_day = date.fromisoformat(req.date) if req.date else datetime.now(tz).date()
        data = day_muhurta(local_day, tz, make_oracle(), place_location(place))
    except DegenerateDay as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    except OracleUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return MuhurtaDayResponse(meta={"tz": place["tz"], "place": place, **flags}, **data)


@router.post("/search", response_model=MuhurtaSearchResponse)
def muhurta_search(req: MuhurtaSearchRequest, make_oracle: Callable = Depends(oracle_factory)):
    place, flags = normalize_place(req.place.model_dump() if req.place else None)
    step = timedelta(minutes=req.options.step_minutes) if req.options.step_minutes else None
    try:
        tz = resolve_tz(place["tz"])
        start = parse_local(req.start, tz)
        end = parse_local(req.end, tz)
        found = search_muhurta(
            req.purpose,
            start,
            end,
            make_oracle(ayanamsha=req.options.ayanamsha),
            place_location(place),
            tz,
            step=step,
        )
    except OracleUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    return MuhurtaSearchResponse(
        meta={"tz": place["tz"], "place": place, "ayanamsha": req.options.ayanamsha, **flags},
        **found.to_dict(tz),
    )
