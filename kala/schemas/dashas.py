from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from .common import ChartInput


class DashaOptions(BaseModel):
    levels: int = Field(default=2, ge=1, le=5)  # 1 = Maha, 2 = +Antar, 3 = +Pratyantar
    ayanamsha: str = "lahiri"
    as_of: Optional[str] = None  # ISO datetime for the active chain; defaults to now
    nested: bool = False


class DashaComputeRequest(BaseModel):
    chart_input: ChartInput
    options: DashaOptions = DashaOptions()


class DashaPeriod(BaseModel):
    level: int
    lord: str
    start: str
    end: str
    parent: Optional[str] = None  # lord one level up
    duration_years: float


class DashaComputeResponse(BaseModel):
    meta: Dict[str, Any]
    periods: List[DashaPeriod]
    current: Dict[str, Any]
    tree: Optional[List[Dict[str, Any]]] = None
