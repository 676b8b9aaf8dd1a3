import logging

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from starlette.middleware.cors import CORSMiddleware
from starlette.staticfiles import StaticFiles

from vidshare.api.routes import categories, channels, downloads, users, videos
from vidshare.core.config.settings import settings
from vidshare.features.catalog.domain.errors import NotFoundError, PermissionDeniedError

logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

settings.ensure_dirs()

app = FastAPI(title="vidshare")
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException):
    return JSONResponse(status_code=exc.status_code, content={"message": exc.detail}, headers=exc.headers)


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(PermissionDeniedError)
async def permission_denied_handler(request: Request, exc: PermissionDeniedError):
    return JSONResponse(status_code=403, content={"message": "Forbidden"})


@app.exception_handler(ValueError)
async def value_error_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=400, content={"message": str(exc)})


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


# Download route first: it shares the /api/videos prefix.
app.include_router(downloads.router)
app.include_router(videos.router)
app.include_router(channels.router)
app.include_router(categories.router)
app.include_router(users.router)

# Stored media references (/uploads/..., /renditions/...) are served as plain files.
app.mount("/uploads", StaticFiles(directory=str(settings.UPLOADS_DIR)), name="uploads")
app.mount("/renditions", StaticFiles(directory=str(settings.RENDITIONS_DIR)), name="renditions")


def run():
    uvicorn.run(app, host="0.0.0.0", port=8888, log_level=settings.LOG_LEVEL.lower())


if __name__ == "__main__":
    run()
