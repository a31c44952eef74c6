import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime, timezone

import dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

dotenv.load_dotenv()

from core import db, errors, settings
from events import router as events_router

logging.basicConfig(level=getattr(logging, settings.log_level(), logging.INFO))
logger = logging.getLogger(__name__)

PAGES = {
    "index": "index.html",
    "search": "search.html",
    "event": "event-details.html",
}


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process. Without it every query
    # endpoint answers 500 until the next restart; health stays up.
    try:
        await db.init_pool()
    except errors.DATA_ACCESS_ERRORS:
        logger.exception("db_pool_init_failed")
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="Charity Events API", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "OPTIONS"],
    allow_headers=["*"],
)

app.add_exception_handler(errors.ApiError, errors.api_error_handler)
app.add_exception_handler(Exception, errors.unhandled_error_handler)

app.include_router(events_router.router, tags=["events"])


def _page_path(page: str) -> str | None:
    frontend = settings.frontend_dir()
    if frontend is None:
        return None
    path = os.path.join(frontend, PAGES[page])
    return path if os.path.isfile(path) else None


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    path = request.url.path
    if exc.status_code == 404 and path.startswith("/api/"):
        return JSONResponse(
            status_code=404,
            content=errors.error_body(
                "API endpoint not found",
                f"No API endpoint matches {path}",
                path=path,
            ),
        )

    if exc.status_code == 404:
        index = _page_path("index")
        if index is not None:
            return FileResponse(index, status_code=404)
        return JSONResponse(
            status_code=404,
            content=errors.error_body("Not found", f"The requested resource {path} was not found"),
        )

    return JSONResponse(
        status_code=exc.status_code,
        content=errors.error_body(str(exc.detail), str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.get("/api/health")
def health() -> dict:
    return {
        "status": "OK",
        "message": "Charity Events API is running",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


def _serve_page(page: str) -> FileResponse:
    path = _page_path(page)
    if path is None:
        raise StarletteHTTPException(status_code=404)
    return FileResponse(path)


@app.get("/", include_in_schema=False)
def home_page() -> FileResponse:
    return _serve_page("index")


@app.get("/search", include_in_schema=False)
def search_page() -> FileResponse:
    return _serve_page("search")


@app.get("/event", include_in_schema=False)
def event_page() -> FileResponse:
    return _serve_page("event")


# Mounted last so API and page routes win; misses fall through to the 404 handler.
if settings.frontend_dir() is not None:
    app.mount("/", StaticFiles(directory=settings.frontend_dir()), name="frontend")


if __name__ == "__main__":
    import uvicorn

    logger.info(
        "server_starting host=%s port=%s env=%s",
        settings.server_host(),
        settings.server_port(),
        settings.app_env(),
    )
    uvicorn.run(app, host=settings.server_host(), port=settings.server_port())
