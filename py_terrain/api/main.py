"""FastAPI main application."""

import logging
import threading
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

import structlog
from fastapi import BackgroundTasks, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.erosion import ErosionParameters
from ..core.noise_field import NoiseParameters
from ..core.smoother import BorderPolicy
from ..core.terrain_generator import TerrainConfig, TerrainGenerator

logger = structlog.get_logger()


def configure_logging(log_level: Optional[str] = None, log_format: Optional[str] = None) -> None:
    """Configure structlog on top of the standard library logger."""
    level = getattr(logging, (log_level or settings.log_level).upper(), logging.INFO)
    logging.basicConfig(format="%(message)s", level=level)

    if (log_format or settings.log_format) == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


# Initialize FastAPI app
app = FastAPI(
    title="Terrain Generator API",
    description="Procedural terrain heightfields and meshes",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# Request/Response models
class TerrainGenerationRequest(BaseModel):
    """Request to generate a new terrain. Unset fields use the configured defaults."""

    width: Optional[int] = Field(None, ge=1, description="Cells along x")
    height: Optional[int] = Field(None, ge=1, description="Cells along y")
    seed: Optional[str] = Field(None, description="Seed for the noise offsets")
    offset_x: Optional[float] = Field(None, description="Explicit noise offset x (requires offset_y)")
    offset_y: Optional[float] = Field(None, description="Explicit noise offset y (requires offset_x)")
    octaves: Optional[int] = Field(None, ge=1, le=16, description="Noise octaves")
    persistence: Optional[float] = Field(None, description="Amplitude decay per octave")
    lacunarity: Optional[float] = Field(None, description="Frequency growth per octave")
    scale: Optional[float] = Field(None, gt=0, description="Base noise frequency")
    smoothing_radius: Optional[int] = Field(None, ge=1, description="Box filter half-width")
    smoothing_border: Optional[BorderPolicy] = Field(None, description="Border policy")
    erosion_radius: Optional[int] = Field(None, ge=1, description="Erosion neighborhood half-width")
    erosion_strength: Optional[float] = Field(None, ge=0, le=1, description="Erosion strength")
    erosion_iterations: Optional[int] = Field(None, ge=0, le=100, description="Erosion passes")

    def offsets(self) -> Optional[Tuple[float, float]]:
        if self.offset_x is None and self.offset_y is None:
            return None
        if self.offset_x is None or self.offset_y is None:
            raise ValueError("offset_x and offset_y must be given together")
        return (self.offset_x, self.offset_y)

    def to_config(self) -> TerrainConfig:
        """Merge this request over the configured defaults."""
        base = TerrainConfig.from_settings(settings)
        width = self.width or base.width
        height = self.height or base.height
        if width > settings.max_width or height > settings.max_height:
            raise ValueError(
                f"Terrain size {width}x{height} exceeds maximum "
                f"{settings.max_width}x{settings.max_height}"
            )

        noise = NoiseParameters(
            octaves=self.octaves if self.octaves is not None else base.noise.octaves,
            persistence=self.persistence if self.persistence is not None else base.noise.persistence,
            lacunarity=self.lacunarity if self.lacunarity is not None else base.noise.lacunarity,
            scale=self.scale if self.scale is not None else base.noise.scale,
        )
        erosion = ErosionParameters(
            radius=self.erosion_radius or base.erosion.radius,
            strength=self.erosion_strength if self.erosion_strength is not None else base.erosion.strength,
        )

        return TerrainConfig(
            width=width,
            height=height,
            noise=noise,
            smoothing_radius=self.smoothing_radius or base.smoothing_radius,
            smoothing_border=self.smoothing_border or base.smoothing_border,
            erosion=erosion,
            erosion_iterations=(
                self.erosion_iterations if self.erosion_iterations is not None else base.erosion_iterations
            ),
            height_scale=base.height_scale,
        )


class JobResponse(BaseModel):
    """Response with job information."""

    job_id: str
    status: str
    message: str
    error_message: Optional[str] = None
    elapsed_seconds: Optional[float] = None


class TerrainSummary(BaseModel):
    """Summary of the current terrain."""

    width: int
    height: int
    vertex_count: int
    triangle_count: int
    offset_x: float
    offset_y: float
    min_height: float
    max_height: float
    height_scale: float
    elapsed_seconds: float


class MeshResponse(BaseModel):
    """Mesh arrays ready for a renderer."""

    width: int
    height: int
    positions: List[List[float]]
    triangles: List[int]
    uvs: List[List[float]]
    colors: List[List[float]]
    normals: List[List[float]]


class HeightmapResponse(BaseModel):
    """Final normalized heightfield, indexed heights[x][y]."""

    width: int
    height: int
    heights: List[List[float]]


class HeightResponse(BaseModel):
    """Terrain height sampled at one cell."""

    x: int
    y: int
    height: float
    normalized_height: float


@dataclass
class GenerationJob:
    """In-memory record of one generation request."""

    id: str
    status: str
    created_at: datetime
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    error_message: Optional[str] = None
    elapsed_seconds: Optional[float] = None

    def to_response(self) -> JobResponse:
        return JobResponse(
            job_id=self.id,
            status=self.status,
            message=f"Job {self.status}",
            error_message=self.error_message,
            elapsed_seconds=self.elapsed_seconds,
        )


class TerrainState:
    """
    Jobs and the generator holding the current terrain.

    At most one job may be pending or running at a time.
    """

    max_finished_jobs = 100

    def __init__(self):
        self._lock = threading.Lock()
        self.jobs: Dict[str, GenerationJob] = {}
        self.generator: Optional[TerrainGenerator] = None

    def create_job(self) -> Optional[GenerationJob]:
        """Register a new pending job, or return None while another is active."""
        with self._lock:
            if any(job.status in ("pending", "running") for job in self.jobs.values()):
                return None
            job = GenerationJob(
                id=str(uuid.uuid4()),
                status="pending",
                created_at=datetime.now(timezone.utc),
            )
            self.jobs[job.id] = job
            self._prune_finished()
            return job

    def _prune_finished(self) -> None:
        """Keep only the most recent finished jobs. Caller holds the lock."""
        finished = [job_id for job_id, job in self.jobs.items() if job.status in ("completed", "failed")]
        for job_id in finished[:-self.max_finished_jobs]:
            del self.jobs[job_id]

    def get_job(self, job_id: str) -> Optional[GenerationJob]:
        with self._lock:
            return self.jobs.get(job_id)

    def update_job(self, job_id: str, **changes) -> None:
        with self._lock:
            job = self.jobs[job_id]
            for key, value in changes.items():
                setattr(job, key, value)

    def set_generator(self, generator: TerrainGenerator) -> None:
        with self._lock:
            self.generator = generator

    def terrain_ready(self) -> bool:
        with self._lock:
            generator = self.generator
        return generator is not None and generator.last_result is not None

    def current_result(self):
        with self._lock:
            generator = self.generator
        if generator is None or generator.last_result is None:
            raise HTTPException(status_code=404, detail="No terrain generated yet")
        return generator.last_result

    def reset(self) -> None:
        with self._lock:
            self.jobs.clear()
            self.generator = None


state = TerrainState()


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Configure logging on startup."""
    configure_logging()
    logger.info("Starting Terrain Generator API", version=__version__)


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Terrain Generator API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Terrain Generator API",
        "version": __version__,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "terrain_ready": state.terrain_ready(),
    }


@app.post("/terrain/generate", response_model=JobResponse)
async def generate_terrain(request: TerrainGenerationRequest, background_tasks: BackgroundTasks):
    """
    Start a terrain generation job.

    Returns immediately with job ID. Use /jobs/{job_id} to check status.
    Only one job runs at a time; requests made meanwhile get 409.
    """
    logger.info("Terrain generation requested", request=request.model_dump(exclude_none=True))

    try:
        config = request.to_config()
        offsets = request.offsets()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    job = state.create_job()
    if job is None:
        raise HTTPException(status_code=409, detail="Terrain generation already in progress")

    background_tasks.add_task(run_terrain_generation, job.id, config, request.seed, offsets)

    return JobResponse(
        job_id=job.id,
        status="pending",
        message="Terrain generation job started",
    )


@app.get("/jobs/{job_id}", response_model=JobResponse)
async def get_job_status(job_id: str):
    """Get status of a terrain generation job."""
    job = state.get_job(job_id)
    if not job:
        raise HTTPException(status_code=404, detail="Job not found")
    return job.to_response()


@app.get("/terrain", response_model=TerrainSummary)
async def get_terrain():
    """Summary of the current terrain."""
    result = state.current_result()
    return TerrainSummary(
        width=result.width,
        height=result.height,
        vertex_count=result.mesh.vertex_count,
        triangle_count=result.mesh.triangle_count,
        offset_x=result.noise_params.offset_x,
        offset_y=result.noise_params.offset_y,
        min_height=float(result.heights.min()),
        max_height=float(result.heights.max()),
        height_scale=result.height_scale,
        elapsed_seconds=result.elapsed_seconds,
    )


@app.get("/terrain/mesh", response_model=MeshResponse)
async def get_terrain_mesh():
    """Mesh of the current terrain."""
    result = state.current_result()
    return MeshResponse(**result.mesh.to_dict())


@app.get("/terrain/heightmap", response_model=HeightmapResponse)
async def get_terrain_heightmap():
    """Final heightfield of the current terrain."""
    result = state.current_result()
    return HeightmapResponse(
        width=result.width,
        height=result.height,
        heights=result.heights.tolist(),
    )


@app.get("/terrain/height", response_model=HeightResponse)
async def get_terrain_height(x: int = Query(..., description="Cell x"), y: int = Query(..., description="Cell y")):
    """Terrain height at a cell, read from the cached heightfield."""
    result = state.current_result()
    try:
        height = result.height_at(x, y)
    except IndexError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return HeightResponse(x=x, y=y, height=height, normalized_height=float(result.heights[x, y]))


# Background task functions
def run_terrain_generation(
    job_id: str,
    config: TerrainConfig,
    seed: Optional[str] = None,
    offsets: Optional[Tuple[float, float]] = None,
) -> None:
    """
    Background task to generate a terrain.
    """
    logger.info("Starting terrain generation", job_id=job_id)
    state.update_job(job_id, status="running", started_at=datetime.now(timezone.utc))

    try:
        generator = TerrainGenerator(config)
        result = generator.generate(seed=seed, offsets=offsets)
        state.set_generator(generator)

        state.update_job(
            job_id,
            status="completed",
            completed_at=datetime.now(timezone.utc),
            elapsed_seconds=result.elapsed_seconds,
        )
        logger.info("Terrain generation completed", job_id=job_id)

    except Exception as e:
        logger.error("Terrain generation failed", job_id=job_id, error=str(e))
        state.update_job(
            job_id,
            status="failed",
            error_message=str(e),
            completed_at=datetime.now(timezone.utc),
        )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
