from pydantic import BaseModel, Field
from typing import Optional


class Place(BaseModel):
    lat: Optional[float] = Field(default=None, ge=-90.0, le=90.0)
    lon: Optional[float] = Field(default=None, ge=-180.0, le=180.0)
    tz: Optional[str] = None
    query: Optional[str] = None
    elevation: Optional[float] = None


class BirthPlace(BaseModel):
    lat: float = Field(ge=-90.0, le=90.0)
    lon: float = Field(ge=-180.0, le=180.0)
    tz: str
    query: Optional[str] = None
    elevation: Optional[float] = None


class ChartInput(BaseModel):
    date: str  # YYYY-MM-DD
    time: str  # HH:MM:SS
    place: BirthPlace
    options: Optional[dict] = None


class Span(BaseModel):
    start_ts: str
    end_ts: str
