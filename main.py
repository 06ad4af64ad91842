import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from mindflow import __version__
from mindflow.api.dependencies import get_analyzer
from mindflow.api.endpoints import router
from mindflow.core.config import settings
from mindflow.core.tracing import instrument_app, setup_tracing, shutdown_tracing
from mindflow.shared.correlation import CorrelationMiddleware
from mindflow.shared.errors import get_correlation_id, internal_error
from mindflow.shared.logging_config import setup_logging

setup_logging(service_name=settings.SERVICE_NAME)
logger = logging.getLogger("Mindflow.Main")


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_tracing(settings.SERVICE_NAME)
    # Without a credential there is no analysis capability; refuse to start.
    get_analyzer()
    logger.info("Mindflow journal service ready")
    yield
    shutdown_tracing()


app = FastAPI(
    title="Mindflow Journal Service",
    description="Journal entry sentiment and emotion analysis. Entries are kept in memory only.",
    version=__version__,
    lifespan=lifespan,
)

app.add_middleware(CorrelationMiddleware)
app.include_router(router, prefix="/api/v1")
instrument_app(app)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return internal_error(correlation_id=get_correlation_id(request))


@app.get("/")
async def root():
    return {"message": "Mindflow Journal Service Running"}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
