from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from .common import Place


class ElementsOptions(BaseModel):
    ayanamsha: str = Field(default="lahiri")


class ElementsRequest(BaseModel):
    datetime: Optional[str] = None  # ISO 8601; naive values are local to place.tz
    place: Optional[Place] = None
    options: ElementsOptions = Field(default_factory=ElementsOptions)


class ElementOut(BaseModel):
    status: str  # "ok" | "error"
    element: Optional[str] = None
    number: Optional[int] = None
    name: Optional[str] = None
    start_ts: Optional[str] = None
    end_ts: Optional[str] = None
    error: Optional[str] = None
    detail: Optional[str] = None


class ElementsResponse(BaseModel):
    meta: Dict[str, Any]
    elements: Dict[str, ElementOut]
