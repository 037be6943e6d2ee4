"""FastAPI main application."""

from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import GenerationRequest, settings
from ..core.errors import MidgardError
from ..core.terrain import Terrain, generate_terrain
from ..core.terrain_analysis import summarize_terrain
from ..utils.logging import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Midgard Terrain API",
    description="Procedural Voronoi terrain generation",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


# Response models
class TerrainSummaryResponse(BaseModel):
    """Summary of a generated terrain."""

    request: GenerationRequest
    cells: int
    corners: int
    edges: int
    border_cells: int
    ocean_cells: int
    lake_cells: int
    coast_cells: int
    land_cells: int
    water_corners: int
    coast_corners: int
    max_elevation: float
    mean_land_elevation: float


class CellData(BaseModel):
    """Read-only view of a cell."""

    index: int
    x: float
    y: float
    kind: str
    corners: List[int]
    neighbors: List[int]
    border: bool
    water: bool
    ocean: bool
    coast: bool
    elevation: float


class CornerData(BaseModel):
    """Read-only view of a corner."""

    index: int
    x: float
    y: float
    border: bool
    water: bool
    ocean: bool
    coast: bool
    distance: float
    elevation: float


class EdgeData(BaseModel):
    """Read-only view of an edge."""

    index: int
    corners: Tuple[int, int]
    left: Optional[int] = Field(description="Cell on the left; null on the outer boundary")
    right: Optional[int] = Field(description="Cell on the right; always set")
    border: bool


class TerrainGraphResponse(BaseModel):
    """Complete graph of a generated terrain."""

    request: GenerationRequest
    max_elevation: float
    cells: List[CellData]
    corners: List[CornerData]
    edges: List[EdgeData]
    bordercells: List[int]


def _generate(request: GenerationRequest) -> Terrain:
    if request.polygon_count > settings.max_polygon_count:
        raise HTTPException(
            status_code=422,
            detail=f"polygon_count may not exceed {settings.max_polygon_count}",
        )
    try:
        return generate_terrain(request)
    except MidgardError as e:
        logger.warning("Terrain generation rejected", error=str(e), error_type=type(e).__name__)
        raise HTTPException(status_code=422, detail=str(e))


# API endpoints
@app.get("/")
def root():
    """Root endpoint."""
    return {
        "message": "Midgard Terrain API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/terrain", response_model=TerrainSummaryResponse)
def generate_summary(request: GenerationRequest):
    """Generate a terrain and return its summary."""
    logger.info("Terrain summary requested", request=request.model_dump(mode="json"))
    terrain = _generate(request)
    return TerrainSummaryResponse(request=request, **summarize_terrain(terrain).to_dict())


@app.post("/terrain/graph", response_model=TerrainGraphResponse)
def generate_graph(request: GenerationRequest):
    """Generate a terrain and return its full graph."""
    logger.info("Terrain graph requested", request=request.model_dump(mode="json"))
    terrain = _generate(request)
    graph = terrain.graph

    return TerrainGraphResponse(
        request=request,
        max_elevation=terrain.max_elevation,
        cells=[
            CellData(
                index=cell.index, x=cell.x, y=cell.y, kind=cell.kind.value,
                corners=cell.corners, neighbors=cell.neighbors,
                border=cell.border, water=cell.water, ocean=cell.ocean,
                coast=cell.coast, elevation=cell.elevation,
            )
            for cell in graph.cells
        ],
        corners=[
            CornerData(
                index=corner.index, x=corner.x, y=corner.y, border=corner.border,
                water=corner.water, ocean=corner.ocean, coast=corner.coast,
                distance=corner.distance, elevation=corner.elevation,
            )
            for corner in graph.corners
        ],
        edges=[
            EdgeData(index=edge.index, corners=(edge.va, edge.vb),
                     left=edge.left, right=edge.right, border=edge.border)
            for edge in graph.edges
        ],
        bordercells=graph.bordercells,
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
