"""
FastAPI web application for the metadata analyzer
"""
from fastapi import FastAPI, HTTPException, Depends, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, validator
from typing import List, Dict, Any, Optional, Literal
import logging
from datetime import datetime

from app import MetaTagApp
from exceptions import MetaTagError, InvalidUrlError, InvalidInputError
from utils import validate_url

logger = logging.getLogger(__name__)


# Pydantic models for API requests
class UrlAnalysisRequest(BaseModel):
    url: str


class TagGeneratorRequest(BaseModel):
    title: str
    description: str
    image: Optional[str] = None
    url: str
    siteName: Optional[str] = None
    type: Literal["website", "article", "product", "video"]

    @validator('title', 'description')
    def must_not_be_blank(cls, v):
        if not v.strip():
            raise ValueError('must not be empty')
        return v

    @validator('url')
    def url_must_be_valid(cls, v):
        if not validate_url(v):
            raise ValueError('must be a valid http(s) URL')
        return v


class ImproveRequest(BaseModel):
    url: str
    title: Optional[str] = None
    description: Optional[str] = None
    content: str = ""
    type: str = "website"


class ValidateRequest(BaseModel):
    tags: Dict[str, Any]


# Initialize FastAPI app
app = FastAPI(
    title="Metadata Analyzer API",
    description="OpenGraph, Twitter Card and JSON-LD analysis with AI suggestions",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Global application instance
metatag_app = None


@app.on_event("startup")
async def startup_event():
    """Initialize the analyzer app on startup"""
    global metatag_app
    try:
        metatag_app = MetaTagApp()
        logger.info("Metadata Analyzer API started successfully")
    except Exception as e:
        logger.error(f"Failed to initialize analyzer app: {e}")
        raise


@app.on_event("shutdown")
async def shutdown_event():
    """Release the shared browser on shutdown"""
    if metatag_app:
        await metatag_app.shutdown()
        logger.info("Metadata Analyzer API shut down successfully")


def get_metatag_app() -> MetaTagApp:
    """Dependency to get the analyzer app instance"""
    if metatag_app is None:
        raise HTTPException(status_code=500, detail="Analyzer app not initialized")
    return metatag_app


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"message": message})


# API Endpoints

@app.get("/", response_model=Dict[str, str])
async def root():
    """Root endpoint"""
    return {
        "message": "Metadata Analyzer API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }


@app.get("/health")
async def health_check(meta_app: MetaTagApp = Depends(get_metatag_app)):
    """Health check endpoint"""
    return meta_app.get_system_status()


@app.get("/metrics")
async def get_metrics(meta_app: MetaTagApp = Depends(get_metatag_app)):
    """Analysis counters and timings"""
    return meta_app.metrics_collector.get_metrics()


@app.post("/api/analyze")
async def analyze_url(request: UrlAnalysisRequest, meta_app: MetaTagApp = Depends(get_metatag_app)):
    """Analyze the social metadata of a URL"""
    try:
        analysis = await meta_app.analyze_url(request.url)
    except InvalidUrlError as e:
        return error_response(400, str(e))
    except MetaTagError as e:
        logger.error(f"Error analyzing URL {request.url}: {e}")
        return error_response(500, str(e))
    return analysis.to_dict()


@app.post("/api/generate")
async def generate_tags(request: TagGeneratorRequest, meta_app: MetaTagApp = Depends(get_metatag_app)):
    """Generate OpenGraph, Twitter Card and JSON-LD markup"""
    try:
        tags = meta_app.generate_tags(
            title=request.title,
            description=request.description,
            url=request.url,
            type=request.type,
            image=request.image or None,
            site_name=request.siteName or None,
        )
    except InvalidInputError as e:
        return error_response(400, str(e))
    return tags.to_dict()


@app.post("/api/improve")
async def improve_tags(request: ImproveRequest, meta_app: MetaTagApp = Depends(get_metatag_app)):
    """AI-suggested title, description and keywords; empty object when unavailable"""
    return await meta_app.improve_tags(
        url=request.url,
        content=request.content,
        type=request.type,
        title=request.title,
        description=request.description,
    )


@app.get("/api/recent", response_model=List[Dict[str, Any]])
async def recent_tags(
    limit: int = Query(10, ge=1, le=100, description="Number of records to return"),
    meta_app: MetaTagApp = Depends(get_metatag_app)
):
    """Most recently generated tag sets"""
    return [tags.to_dict() for tags in meta_app.get_recent_tags(limit)]


@app.post("/api/validate")
async def validate_tags(request: ValidateRequest, meta_app: MetaTagApp = Depends(get_metatag_app)):
    """Check presence, length and format of a tag set"""
    return meta_app.validate_tags(request.tags)


# Custom exception handler
@app.exception_handler(Exception)
async def global_exception_handler(request, exc):
    """Global exception handler"""
    logger.error(f"Unhandled exception: {exc}")
    return JSONResponse(
        status_code=500,
        content={
            "message": "Internal server error",
            "timestamp": datetime.now().isoformat()
        }
    )
