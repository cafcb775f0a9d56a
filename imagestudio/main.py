"""
Image Studio Main Application
"""

import base64
import time
from typing import Optional

import uvicorn
from fastapi import APIRouter, FastAPI, HTTPException, UploadFile, File, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field
from starlette.exceptions import HTTPException as StarletteHTTPException

from imagestudio.core.config import Settings, get_settings, get_cors_config, get_log_config, get_image_processing_config
from imagestudio.core.services.enhancement_service import EnhancementService, EnhancementResult
from imagestudio.core.services.generation_service import GenerationService
from imagestudio.ai_engine.image_processing.core.pipeline import PIPELINE_VERSION
from imagestudio.ai_engine.image_processing.utils.image_utils import InvalidArgumentError
from imagestudio.ai_engine.utils.error_handler import ErrorType, error_handler
from imagestudio.ai_engine.utils.logging_config import setup_logging, get_logger

logger = get_logger(__name__)

settings = get_settings()

enhancement_service = EnhancementService(settings)
generation_service = GenerationService(settings)

ENHANCEMENT_TYPES = ('super-resolution', 'style-transfer', 'colorization')

startup_time = time.time()
request_count = 0

app = FastAPI(
    title=settings.app_name,
    description="Raster filters, attention scoring and mock text-to-design generation",
    version=settings.app_version,
    docs_url="/docs",
    redoc_url="/redoc",
    debug=settings.debug,
)

app.add_middleware(CORSMiddleware, **get_cors_config(settings))

router = APIRouter(prefix=settings.api_v1_prefix)

class GenerateRequest(BaseModel):
    """Body of a generation request"""
    prompt: str
    seed: Optional[int] = None
    creativity: float = 0.5
    batch: bool = False
    batch_count: int = Field(default=1, validation_alias=AliasChoices("batch_count", "batchCount"))

# Request counting middleware
@app.middleware("http")
async def count_requests(request, call_next):
    global request_count
    request_count += 1

    start_time = time.time()
    response = await call_next(request)
    process_time = time.time() - start_time

    response.headers["X-Process-Time"] = str(process_time)
    response.headers["X-Request-Count"] = str(request_count)

    return response

async def read_upload(file: UploadFile, settings: Settings) -> bytes:
    """Validate and read an uploaded image"""
    if not file.content_type or not file.content_type.startswith('image/'):
        raise HTTPException(status_code=400, detail="File must be an image")

    image_data = await file.read()

    if len(image_data) == 0:
        raise HTTPException(status_code=400, detail="Empty image file")

    if len(image_data) > settings.max_image_size_bytes:
        raise HTTPException(
            status_code=413,
            detail=f"Image file too large (max {settings.max_image_size_mb}MB)"
        )

    return image_data

def build_response(result: EnhancementResult, file: UploadFile, file_size: int) -> JSONResponse:
    """Turn a service result into the JSON payload, raising on failure"""
    if not result.success:
        status_code = 400 if result.client_error else 500
        raise HTTPException(status_code=status_code, detail=result.error)

    response_data = {
        "success": True,
        "operation": result.operation,
        "attention_score": result.attention_score,
        "metrics": result.metrics,
        "parameters": result.parameters,
        "original_size": result.original_size,
        "output_size": result.output_size,
        "processing_time": result.processing_time,
        "warnings": result.warnings,
        "metadata": {
            "filename": file.filename,
            "file_size": file_size,
            "content_type": file.content_type,
        },
    }

    if result.image_bytes is not None:
        response_data["processed_image"] = base64.b64encode(result.image_bytes).decode('utf-8')
        response_data["content_type"] = result.content_type

    return JSONResponse(response_data)

# Health check endpoints
@app.get("/health")
async def health_check():
    """Basic health check endpoint"""
    return JSONResponse({
        "status": "healthy",
        "timestamp": time.time(),
        "uptime": time.time() - startup_time,
        "request_count": request_count,
        "filter_engine": enhancement_service.check_health(),
        "image_processing": get_image_processing_config(settings),
        "version": settings.app_version,
        "features": {
            "restore": True,
            "super_resolution": True,
            "style_transfer": True,
            "colorization": True,
            "attention_score": True,
            "generation": True,
        },
    })

# Filter endpoints
@router.post("/restore")
async def restore_image(
    file: UploadFile = File(...),
    strength: float = Query(0.5, description="Restoration strength, clamped to [0, 1]"),
    settings: Settings = Depends(get_settings),
):
    """
    Stretch contrast and denoise toward mid-gray, then score the result
    """
    image_data = await read_upload(file, settings)
    result = await enhancement_service.process(image_data, 'restore', {'strength': strength})
    return build_response(result, file, len(image_data))

@router.post("/enhance")
async def enhance_image(
    file: UploadFile = File(...),
    enhancement_type: str = Query(..., description="super-resolution, style-transfer or colorization"),
    upscale_factor: Optional[int] = Query(None, description="Integer upscale factor"),
    style: Optional[str] = Query(None, description="vintage, vivid, monochrome, cool or warm"),
    color_scheme: Optional[str] = Query(None, description="natural, cool or warm"),
    intensity: Optional[float] = Query(None, description="Effect intensity, clamped to [0, 1]"),
    settings: Settings = Depends(get_settings),
):
    """
    Apply one enhancement filter to an uploaded image
    """
    if enhancement_type not in ENHANCEMENT_TYPES:
        raise HTTPException(
            status_code=400,
            detail=f"enhancement_type must be one of: {', '.join(ENHANCEMENT_TYPES)}"
        )

    image_data = await read_upload(file, settings)
    options = {
        'upscale_factor': upscale_factor,
        'style': style,
        'color_scheme': color_scheme,
        'intensity': intensity,
    }
    result = await enhancement_service.process(image_data, enhancement_type, options)
    return build_response(result, file, len(image_data))

@router.post("/attention-score")
async def attention_score(
    file: UploadFile = File(...),
    settings: Settings = Depends(get_settings),
):
    """
    Sharpness-based attention score in [0, 10]
    """
    image_data = await read_upload(file, settings)
    result = await enhancement_service.score_image(image_data)
    return build_response(result, file, len(image_data))

@router.post("/generate")
async def generate_design(request: GenerateRequest):
    """
    Generate placeholder designs for a prompt
    """
    try:
        results = await generation_service.generate(
            request.prompt,
            seed=request.seed,
            creativity=request.creativity,
            batch=request.batch,
            batch_count=request.batch_count,
        )
    except InvalidArgumentError as e:
        error_handler.handle_error(e, ErrorType.VALIDATION_ERROR, {"operation": "generate"})
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        error_handler.handle_error(e, ErrorType.GENERATION_ERROR, {"operation": "generate"})
        raise HTTPException(status_code=500, detail="Generation failed")

    payload = [result.to_dict() for result in results]
    return JSONResponse({
        "success": True,
        "result": payload if request.batch else payload[0],
    })

# Statistics and monitoring endpoints
@router.get("/processing-statistics")
async def get_processing_statistics():
    """
    Get comprehensive processing statistics
    """
    stats = enhancement_service.get_statistics()
    stats["generation"] = generation_service.get_statistics()

    stats["api_statistics"] = {
        "total_requests": request_count,
        "uptime_seconds": time.time() - startup_time,
        "requests_per_minute": request_count / max((time.time() - startup_time) / 60, 1),
    }

    return JSONResponse(stats)

app.include_router(router)

# Error handlers
@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request, exc):
    """Custom HTTP exception handler"""
    return JSONResponse(
        status_code=exc.status_code,
        content={
            "error": exc.detail,
            "status_code": exc.status_code,
            "timestamp": time.time()
        }
    )

@app.exception_handler(Exception)
async def general_exception_handler(request, exc):
    """General exception handler"""
    logger.error(f"Unhandled exception: {str(exc)}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "status_code": 500,
            "timestamp": time.time()
        }
    )

# Startup and shutdown events
@app.on_event("startup")
async def startup_event():
    """Application startup tasks"""
    global startup_time
    log_config = get_log_config(settings)
    setup_logging(
        log_level=log_config["level"],
        log_file=log_config["file"],
        max_file_size=log_config["max_size"],
        backup_count=log_config["backup_count"],
        format_string=log_config["format"],
    )
    startup_time = time.time()

    logger.info(f"Starting {settings.app_name} {settings.app_version} ({settings.environment})")
    logger.info(f"Filter pipeline version: {PIPELINE_VERSION}")

@app.on_event("shutdown")
async def shutdown_event():
    """Application shutdown tasks"""
    logger.info(f"Shutting down {settings.app_name}...")

# Root endpoint
@app.get("/")
async def root():
    """API root endpoint with feature overview"""
    return JSONResponse({
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Raster filters, attention scoring and mock text-to-design generation",
        "features": {
            "filters": {
                "description": "Deterministic RGBA filters",
                "endpoints": [f"{settings.api_v1_prefix}/restore", f"{settings.api_v1_prefix}/enhance"],
                "capabilities": list(ENHANCEMENT_TYPES) + ["restore"],
            },
            "attention_score": {
                "description": "Sharpness-based attention score in [0, 10]",
                "endpoints": [f"{settings.api_v1_prefix}/attention-score"],
            },
            "generation": {
                "description": "Mock text-to-design generation",
                "endpoints": [f"{settings.api_v1_prefix}/generate"],
            },
        },
        "documentation": {
            "swagger_ui": "/docs",
            "redoc": "/redoc",
        },
    })

def run():
    """Serve the app with uvicorn"""
    uvicorn.run(
        "imagestudio.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.reload,
        log_level=settings.log_level.lower(),
    )

if __name__ == "__main__":
    run()
