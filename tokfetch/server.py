"""
HTTP API exposing the downloader and its statistics.
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from tokfetch.config.version import VERSION
from tokfetch.downloader import Downloader
from tokfetch.errors import DownloadError, ValidationError
from tokfetch.messages import get_message
from tokfetch.platform_handler import default_extractors
from tokfetch.stats import StatsRegistry


class DownloadRequest(BaseModel):
    url: Optional[str] = None


def create_app(downloader, stats, settings):
    language = settings['general']['language']

    @asynccontextmanager
    async def lifespan(app):
        logging.info(f"{get_message('service_name', language)} {VERSION} ready")
        yield
        logging.info("Shutting down gracefully...")

    app = FastAPI(title=get_message('service_name', language), version=VERSION, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings['server'].get('cors_origins', ["*"]),
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        logging.info(f"Rejected malformed request body on {request.url.path}")
        return JSONResponse(status_code=400, content={'error': get_message('url_required', language)})

    # Handlers are sync so each request runs on its own worker thread.
    @app.get("/")
    def describe():
        return {
            'message': get_message('service_name', language),
            'status': "running",
            'version': VERSION,
            'methods': {
                extractor.method: extractor.label
                for extractor in downloader.extractors
            },
            'stats': stats.snapshot(),
            'endpoints': {
                'download': "POST /api/download",
                'status': "GET /api/status",
            },
        }

    @app.get("/api/status")
    def status():
        return {
            'status': "online",
            'uptimeSeconds': stats.uptime_seconds(),
            'stats': stats.snapshot(),
        }

    @app.post("/api/download")
    def download(payload: DownloadRequest):
        try:
            result = downloader.download(payload.url)
        except ValidationError as e:
            return JSONResponse(status_code=400, content={'error': e.message})
        except DownloadError as e:
            return JSONResponse(
                status_code=500,
                content={'error': get_message('processing_failed', language), 'message': e.message}
            )
        return result.to_dict()

    return app


def build_app(settings):
    """Wires the default strategies, stats and downloader into an app."""
    stats = StatsRegistry()
    downloader = Downloader(default_extractors(settings), stats, settings)
    return create_app(downloader, stats, settings)
