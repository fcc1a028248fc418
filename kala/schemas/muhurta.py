from pydantic import BaseModel, Field
from typing import Optional, List, Dict, Any
from .common import Place, Span


class MuhurtaDayRequest(BaseModel):
    date: Optional[str] = None  # YYYY-MM-DD local to place.tz; defaults to today
    place: Optional[Place] = None


class HoraOut(Span):
    lord: str


class ChoghadiyaOut(Span):
    name: str
    nature: str


class ChoghadiyaSet(BaseModel):
    day: List[ChoghadiyaOut]
    night: List[ChoghadiyaOut]


class MuhurtaDayResponse(BaseModel):
    meta: Dict[str, Any]
    date: str
    weekday: str
    sunrise: str
    sunset: str
    next_sunrise: str
    blocks: Dict[str, Span]
    horas: List[HoraOut]
    choghadiya: ChoghadiyaSet


class MuhurtaSearchOptions(BaseModel):
    ayanamsha: str = "lahiri"
    step_minutes: Optional[int] = Field(default=None, ge=1, le=240)


class MuhurtaSearchRequest(BaseModel):
    purpose: str
    start: str  # ISO datetime, local to place.tz when naive
    end: str
    place: Optional[Place] = None
    options: MuhurtaSearchOptions = Field(default_factory=MuhurtaSearchOptions)


class WindowOut(Span):
    quality: str
    factors: List[str]


class MuhurtaSearchResponse(BaseModel):
    meta: Dict[str, Any]
    purpose: str
    windows: List[WindowOut]
    skipped_days: List[str]
