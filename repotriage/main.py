import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from repotriage import __version__
from repotriage.config import get_settings
from repotriage.api.routes import triage

settings = get_settings()

# Configure application logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)

# Set log level for app modules
logger = logging.getLogger("repotriage")
logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

app = FastAPI(
    title=settings.app_name,
    description="Triage of GitHub accounts distributing malware as archive files",
    version=__version__,
)

app.include_router(triage.router, tags=["Triage"])


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"error": "404 not found"})
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


@app.get("/")
async def root():
    return {
        "message": f"Welcome to {settings.app_name}",
        "version": __version__,
        "endpoints": {
            "triage": "/api?url=<github profile or repository url>",
            "health": "/health",
            "docs": "/docs",
        },
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy", "service": settings.app_name}
