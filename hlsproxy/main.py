from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import BaseModel

from hlsproxy.core.bootstrap import init

init()

from hlsproxy.api import router as proxy_router  # noqa: E402
from hlsproxy.config import CORS_ALLOW_CREDENTIALS, CORS_ORIGINS_LIST  # noqa: E402
from hlsproxy.core.lifespan import lifespan  # noqa: E402
from hlsproxy.cors import apply_cors_middleware  # noqa: E402


class HealthResponse(BaseModel):
    status: str
    timestamp: str


app = FastAPI(title="hlsproxy", lifespan=lifespan)
app.include_router(proxy_router)  # playlist + segment proxy
apply_cors_middleware(
    app, origins=CORS_ORIGINS_LIST, allow_credentials=CORS_ALLOW_CREDENTIALS
)


# Healthcheck endpoint for CI/CD and monitoring
@app.get("/health", response_model=HealthResponse)
async def healthcheck():
    return HealthResponse(
        status="OK", timestamp=datetime.now(timezone.utc).isoformat()
    )


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception):
    logger.opt(exception=exc).error(f"Unhandled error on {request.url.path}")
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "details": str(exc)},
    )


if __name__ == "__main__":
    from hlsproxy.cli import run_server

    run_server(app)
