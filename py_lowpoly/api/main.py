"""FastAPI main application."""

import logging
from typing import List, Optional, Tuple

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..core.colorizer import ColorMode
from ..core.errors import InvalidInputError
from ..core.image_buffer import ImageBuffer
from ..core.pipeline import MosaicConfig, generate_mosaic

# Configure logging
logging.basicConfig(format="%(message)s", level=settings.log_level.upper())

renderer = (
    structlog.dev.ConsoleRenderer()
    if settings.log_format == "console"
    else structlog.processors.JSONRenderer()
)
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

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Low-Poly Mosaic API",
    description="Delaunay mosaic generation from raster images",
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
class MosaicRequest(BaseModel):
    """Request to turn an image into a mosaic."""

    image: str = Field(..., description="Base64 image or data URL")
    blur_kernel_size: int = Field(settings.default_blur_kernel_size, ge=1, le=31,
                                  description="Box blur kernel side (odd)")
    edge_kernel_size: int = Field(settings.default_edge_kernel_size, ge=1, le=31,
                                  description="Edge kernel side (odd)")
    threshold: int = Field(settings.default_threshold, ge=0, le=255,
                           description="Edge threshold on the red channel")
    sample_rate: float = Field(settings.default_sample_rate, gt=0, le=1,
                               description="Fraction of edge points to triangulate")
    color_mode: ColorMode = Field(ColorMode(settings.default_color_mode),
                                  description="Triangle colouring mode")
    seed: Optional[int] = Field(None, description="Sampling seed for reproducible output")
    max_width: int = Field(settings.max_image_width, ge=1, description="Scale images wider than this")
    max_height: int = Field(settings.max_image_height, ge=1, description="Scale images taller than this")
    include_background: bool = Field(False, description="Return the unsampled edge points")


class ColoredTriangle(BaseModel):
    """One mosaic cell."""

    vertices: List[Tuple[float, float]]
    color: Tuple[int, int, int]
    hex: str


class MosaicResponse(BaseModel):
    """Generated mosaic."""

    width: int
    height: int
    triangle_count: int
    sampled_count: int
    triangles: List[ColoredTriangle]
    background_points: Optional[List[Tuple[int, int]]] = None


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Low-Poly Mosaic API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.post("/mosaics", response_model=MosaicResponse)
def create_mosaic(request: MosaicRequest):
    """
    Generate a mosaic synchronously.

    Runs in FastAPI's thread pool; each request owns its buffers.
    """
    logger.info("Mosaic requested",
                sample_rate=request.sample_rate, color_mode=request.color_mode.value,
                seed=request.seed)

    try:
        image = ImageBuffer.from_base64(request.image)
    except InvalidInputError as e:
        logger.error("Image decoding failed", error=str(e))
        raise HTTPException(status_code=400, detail=str(e))

    image = image.fit_to_bounds(request.max_width, request.max_height)
    config = MosaicConfig(
        blur_kernel_size=request.blur_kernel_size,
        edge_kernel_size=request.edge_kernel_size,
        threshold=request.threshold,
        sample_rate=request.sample_rate,
        color_mode=request.color_mode,
        seed=request.seed,
    )

    try:
        mosaic = generate_mosaic(image, config)
    except InvalidInputError as e:
        logger.error("Mosaic generation failed", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    triangles = [
        ColoredTriangle(
            vertices=[(float(v.x), float(v.y)) for v in triangle.vertices],
            color=tuple(color),
            hex=color.to_hex(),
        )
        for triangle, color in mosaic.cells()
    ]

    return MosaicResponse(
        width=mosaic.width,
        height=mosaic.height,
        triangle_count=len(mosaic),
        sampled_count=len(mosaic.sampled_points),
        triangles=triangles,
        background_points=(
            [(int(p.x), int(p.y)) for p in mosaic.remaining_points]
            if request.include_background else None
        ),
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
