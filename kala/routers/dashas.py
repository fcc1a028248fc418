from datetime import datetime, timezone
from typing import Callable

from fastapi import APIRouter, Depends, HTTPException

from ..schemas import DashaComputeRequest, DashaComputeResponse
from ..services.dasha import compute_vimshottari, current_dasha, flatten_periods, nested_periods, year_length
from ..services.ephem import ENGINE_VERSION, oracle_factory
from ..services.errors import OracleUnavailable
from ..services.timebase import ensure_utc

router = APIRouter(prefix="/v1/dashas", tags=["dashas"])


@router.post("/compute", response_model=DashaComputeResponse)
def compute_dashas(req: DashaComputeRequest, make_oracle: Callable = Depends(oracle_factory)):
    # chart_input.options wins over request options for the ayanamsha
    ayan = (req.chart_input.options or {}).get("ayanamsha", req.options.ayanamsha)
    try:
        as_of = ensure_utc(datetime.fromisoformat(req.options.as_of)) if req.options.as_of else datetime.now(timezone.utc)
        result = compute_vimshottari(req.chart_input.model_dump(), make_oracle(ayanamsha=ayan), levels=req.options.levels)
    except OracleUnavailable as exc:
        raise HTTPException(status_code=503, detail=str(exc)) from exc
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    root = result["tree"]
    return DashaComputeResponse(
        meta={
            "system": "vedic",
            "ayanamsha": ayan,
            "levels": req.options.levels,
            "engine_version": ENGINE_VERSION,
            "year_days": year_length().total_seconds() / 86400.0,
            "birth_utc": result["birth_utc"],
            "moon_longitude": result["moon_longitude"],
            "nakshatra": result["nakshatra"],
            "balance_years": result["balance_years"],
        },
        periods=flatten_periods(root),
        current=current_dasha(root, as_of),
        tree=nested_periods(root) if req.options.nested else None,
    )
