# forecourt/main.py
import os
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from .api.pages import router as pages_router
from .api.routes import router as api_router
from .config import Settings
from .errors import ListingError
from .garages import GarageLookup
from .services import ListingService
from .store import make_store
from .utils import logger


def create_app(settings: Settings = None, service: ListingService = None, garages: GarageLookup = None) -> FastAPI:
    settings = settings or Settings.from_env()
    if service is None:
        service = ListingService(
            make_store(settings),
            admin_key=settings.admin_key,
            hide_window=settings.hide_window,
        )

    app = FastAPI(title="Forecourt")
    app.state.settings = settings
    app.state.service = service
    app.state.garages = garages or GarageLookup(settings.garages_file)

    @app.exception_handler(ListingError)
    async def listing_error_handler(request: Request, exc: ListingError):
        return JSONResponse({"success": False, "message": exc.message}, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def bad_request_handler(request: Request, exc: RequestValidationError):
        logger.info("Rejected %s %s: %s", request.method, request.url.path, exc.errors())
        return JSONResponse({"success": False, "message": "Bad JSON"}, status_code=400)

    app.include_router(api_router)
    app.include_router(pages_router)

    # anything else under the static dir (images, css, js)
    if os.path.isdir(settings.static_dir):
        app.mount("/", StaticFiles(directory=settings.static_dir), name="static")
    else:
        logger.warning("Static dir %s missing; only API routes are served", settings.static_dir)

    logger.info("App ready (store=%s, hide window=%s)", type(service.store).__name__, service.hide_window)
    return app
