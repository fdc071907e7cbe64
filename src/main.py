import logging
from typing import Optional

import uvicorn
from fastapi import FastAPI, Request
from starlette.responses import Response

from .config import Settings, load_settings
from .feature_modules.frontend.proxy import FrontendProxy
from .feature_modules.transcription.adapters.deepgram import DeepgramTranscriber, Transcriber

from .feature_modules.transcription.routes import router as stt_router
from .feature_modules.metadata.routes import router as metadata_router
# Catch-all; keep last
from .feature_modules.frontend.routes import router as frontend_router

logger = logging.getLogger("uvicorn.error")


def cors_headers(settings: Settings) -> dict[str, str]:
    return {
        "Access-Control-Allow-Origin": settings.frontend_origin,
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type",
        "Access-Control-Allow-Credentials": "true",
    }


def create_app(
    settings: Optional[Settings] = None,
    transcriber: Optional[Transcriber] = None,
    frontend_proxy: Optional[FrontendProxy] = None,
) -> FastAPI:
    settings = settings or load_settings()

    app = FastAPI(title="Transcription Relay")
    app.state.settings = settings
    app.state.transcriber = transcriber or DeepgramTranscriber.from_settings(settings)
    app.state.frontend_proxy = frontend_proxy or FrontendProxy(settings.frontend_port)

    if settings.enable_cors:
        headers = cors_headers(settings)

        # Starlette's CORSMiddleware answers preflights with 200; the frontend contract is 204 for any OPTIONS.
        @app.middleware("http")
        async def cors(request: Request, call_next):
            if request.method == "OPTIONS":
                return Response(status_code=204, headers=headers)
            response = await call_next(request)
            response.headers.update(headers)
            return response

    app.include_router(stt_router)
    app.include_router(metadata_router)
    app.include_router(frontend_router)
    return app


def run() -> None:
    logging.basicConfig(level=logging.INFO)
    settings = load_settings()
    app = create_app(settings)

    mode = settings.effective_serve_mode
    logger.info("Backend API server listening on http://%s:%s", settings.host, settings.port)
    if mode == "proxy":
        logger.info("Proxying frontend requests to http://localhost:%s", settings.frontend_port)
    elif mode == "static":
        logger.info("Serving frontend from %s", settings.static_dir)
    if settings.enable_cors:
        logger.info("CORS enabled for %s", settings.frontend_origin)

    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
