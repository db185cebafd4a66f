# forecourt/api/pages.py
"""Marketing pages and the garage dashboard, served as plain files."""
import os
from fastapi import APIRouter, Request
from fastapi.responses import FileResponse, PlainTextResponse

router = APIRouter()

PAGES = {
    "/": "index.html",
    "/cars-page": "cars.html",
    "/car": "car.html",
    "/for-garages": "for-garages.html",
    "/garage-dashboard": "garage-dashboard.html",
}


def serve_file(static_dir: str, filename: str):
    path = os.path.join(static_dir, filename)
    if not os.path.isfile(path):
        return PlainTextResponse("Not found", status_code=404)
    return FileResponse(path)


def _page_endpoint(filename: str):
    def endpoint(request: Request):
        return serve_file(request.app.state.settings.static_dir, filename)
    endpoint.__name__ = "page_" + filename.replace("-", "_").replace(".", "_")
    return endpoint


for _path, _filename in PAGES.items():
    router.add_api_route(_path, _page_endpoint(_filename), methods=["GET"], include_in_schema=False)
