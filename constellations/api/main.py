"""FastAPI main application."""

from typing import List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool

from .. import __version__
from ..config import settings
from ..core.chords import Chord
from ..core.constellation import generate_constellation
from ..core.graph_walk import walk_beats, walk_path
from ..exceptions import ConfigurationError
from ..utils.logging import configure_logging
from ..utils.random import create_rng_from_seed_and_state

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Musical Constellations API",
    description="Deterministic constellation graph generation",
    version=__version__,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class ConstellationRequest(BaseModel):
    """Request to generate a constellation."""

    num_points: int = Field(settings.num_points, ge=0, description="Number of points / nodes")
    radius: float = Field(settings.radius, description="Sphere radius")
    max_neighbor_count: int = Field(settings.max_neighbor_count, ge=1, le=settings.max_api_neighbor_count, description="Upper bound on intra-cluster degree")
    global_seed: int = Field(settings.global_seed, ge=-(2**63), le=2**63 - 1, description="Seed for reproducible generation")
    local_seed: Optional[int] = Field(None, ge=0, le=2**32 - 1, description="Local seed, defaults to the configured root seed")


class ConstellationResponse(BaseModel):
    """Generated constellation with a short summary."""

    global_seed: int
    local_seed: int
    chord: str
    chord_intervals: List[int]
    semitone_offset: int
    node_count: int
    edge_count: int
    island_sizes: List[int]
    nodes: List[List[float]]
    edges: List[List[int]]
    islands: List[List[int]]


class WalkRequest(ConstellationRequest):
    """Request to plan a walk over a generated constellation."""

    start_node: int = Field(0, ge=0, description="Node the walk starts from")


class WalkResponse(BaseModel):
    """Nodes visited by a walk and the beats spent on each edge."""

    start_node: int
    island: int
    path: List[int]
    beats: List[int]


class ChordInfo(BaseModel):
    name: str
    intervals: List[int]


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Musical Constellations API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/chords", response_model=List[ChordInfo])
async def list_chords():
    """List the chords a constellation can be generated with."""
    return [ChordInfo(name=chord.value, intervals=chord.intervals) for chord in Chord]


async def _generate(request: ConstellationRequest):
    """Run generation in a worker thread. Returns (local_seed, constellation)."""
    if request.num_points > settings.max_api_points:
        raise HTTPException(
            status_code=400,
            detail=f"num_points must be <= {settings.max_api_points}",
        )

    local_seed = settings.root_local_seed if request.local_seed is None else request.local_seed
    logger.info("Constellation generation requested", request=request.model_dump())

    rng = create_rng_from_seed_and_state(local_seed, request.global_seed)
    try:
        constellation = await run_in_threadpool(
            generate_constellation,
            request.num_points,
            request.radius,
            request.max_neighbor_count,
            rng,
            settings.points_per_cluster,
        )
    except ConfigurationError as e:
        logger.warning("Rejected generation parameters", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    return local_seed, constellation


@app.post("/constellations/generate", response_model=ConstellationResponse)
async def generate(request: ConstellationRequest):
    """
    Generate a constellation.

    Generation runs in a worker thread; identical requests give identical
    responses.
    """
    local_seed, constellation = await _generate(request)

    data = constellation.to_dict()
    return ConstellationResponse(
        global_seed=request.global_seed,
        local_seed=local_seed,
        chord=data["chord"],
        chord_intervals=constellation.chord.intervals,
        semitone_offset=data["semitone_offset"],
        node_count=constellation.graph.node_count(),
        edge_count=constellation.graph.edge_count(),
        island_sizes=constellation.island_sizes,
        nodes=data["nodes"],
        edges=data["edges"],
        islands=data["islands"],
    )


@app.post("/constellations/walk", response_model=WalkResponse)
async def walk(request: WalkRequest):
    """Generate a constellation and plan a walk from `start_node`."""
    _, constellation = await _generate(request)

    if request.start_node >= constellation.graph.node_count():
        raise HTTPException(status_code=400, detail="Invalid start node")

    path = walk_path(constellation.graph, request.start_node)
    return WalkResponse(
        start_node=request.start_node,
        island=constellation.island_of(request.start_node),
        path=path,
        beats=walk_beats(constellation.graph, path),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
