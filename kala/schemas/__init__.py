from .common import ChartInput, Place, BirthPlace, Span

from .dashas import DashaComputeRequest, DashaComputeResponse
from .panchang import ElementsRequest, ElementsResponse
from .muhurta import (
    MuhurtaDayRequest,
    MuhurtaDayResponse,
    MuhurtaSearchRequest,
    MuhurtaSearchResponse,
)
