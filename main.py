import uvicorn
import time
import logging
from typing import Optional

from fastapi import FastAPI, Request
from starlette.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from bug_detector.api.analyze import router as analyze_router
from bug_detector.core.config import AppConfig, get_log_dir, get_log_level, load_config
from bug_detector.services.analyzer import AnalysisService
from bug_detector.utils.logging_config import setup_logging

logger = logging.getLogger("main")


# ---------------------------------------------------------------------------
# Logging Middleware
# ---------------------------------------------------------------------------
class LoggingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        client_host = request.client.host if request.client else "unknown"
        logger.info(f"Incoming: {request.method} {request.url.path} from {client_host}")

        try:
            response = await call_next(request)
            process_time = (time.time() - start_time) * 1000
            logger.info(
                f"Outgoing: {request.method} {request.url.path} - "
                f"Status: {response.status_code} - "
                f"Time: {process_time:.2f}ms"
            )
            return response
        except Exception as e:
            logger.error(f"Request failed: {request.method} {request.url.path} - Error: {str(e)}")
            raise


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the API. The config is resolved once here unless one is injected."""
    if config is None:
        config = load_config()

    app = FastAPI(title="Bug Detector API")
    app.state.config = config
    app.state.analysis_service = AnalysisService(config)
    logger.info(f"Analysis mode: {config.mode} (apiBase: {config.api_base or 'none'})")

    app.add_middleware(LoggingMiddleware)

    # -----------------------------------------------------------------------
    # CORS — allow the frontend dev servers to call the backend
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[
            "http://localhost:3000",
            "http://127.0.0.1:3000",
            "http://localhost:4321",
            "http://127.0.0.1:4321",
        ],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    async def health_check():
        return {"status": "ok"}

    app.include_router(analyze_router)
    return app


# load_config() reads .env first so LOG_LEVEL / LOG_DIR from it apply too
CONFIG = load_config()
setup_logging(level=get_log_level(), log_dir=get_log_dir())
app = create_app(CONFIG)

if __name__ == "__main__":
    uvicorn.run("main:app", host="127.0.0.1", port=8000, reload=True)
