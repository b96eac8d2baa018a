"""
FastAPI application entry point.
"""
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from src.api.routes import health, signals, assessments, escalations, social_signals, reference
from src.core.exceptions import WorkflowError, NotFound, PermissionDenied
from src.utils.metrics import registry
from src.utils.logging import get_logger

logger = get_logger(__name__)

app = FastAPI(
    title="GHI Signals API",
    description="Outbreak signal intake, triage, IHR assessment and director escalation",
    version="1.0.0"
)

# CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(health.router, tags=["Health"])
app.include_router(signals.router, prefix="/signals", tags=["Signals"])
app.include_router(assessments.router, prefix="/assessments", tags=["Assessments"])
app.include_router(escalations.router, prefix="/escalations", tags=["Escalations"])
app.include_router(social_signals.router, prefix="/social-signals", tags=["Social Listener"])
app.include_router(reference.router, prefix="/reference", tags=["Reference"])

# Refused transitions that are not 404/403 are state conflicts
ERROR_STATUS_CODES = {
    NotFound: 404,
    PermissionDenied: 403,
}

@app.exception_handler(WorkflowError)
async def workflow_error_handler(request: Request, exc: WorkflowError):
    status_code = ERROR_STATUS_CODES.get(type(exc), 409)
    return JSONResponse(
        status_code=status_code,
        content={"error": type(exc).__name__, "reason": exc.reason}
    )

@app.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""
    return Response(generate_latest(registry), media_type=CONTENT_TYPE_LATEST)

@app.get("/")
def root():
    return {
        "name": "GHI Signals API",
        "docs": "/docs",
        "health": "/health",
    }

@app.on_event("startup")
async def startup_event():
    logger.info("GHI Signals API starting")
