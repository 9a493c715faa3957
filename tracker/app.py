import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.engine import Engine

from tracker.config import Settings, settings as default_settings
from tracker.database import create_db_engine, create_session_factory, init_db
from tracker.models import Incident  # noqa: F401
from tracker.routers.incidents.read import router as incidents_read_router
from tracker.routers.incidents.write import router as incidents_write_router
from tracker.services.incidents_client import IncidentsClient
from tracker.web.pages import router as web_router

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


class HealthCheckFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        return "/api/healthcheck" not in record.getMessage()


def configure_logging(level: str) -> None:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    access_logger = logging.getLogger("uvicorn.access")
    if not any(isinstance(f, HealthCheckFilter) for f in access_logger.filters):
        access_logger.addFilter(HealthCheckFilter())


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"loc": list(error.get("loc", [])), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"detail": jsonable_encoder(errors)})


def create_app(app_settings: Settings | None = None, engine: Engine | None = None) -> FastAPI:
    app_settings = app_settings or default_settings
    configure_logging(app_settings.log_level)

    engine = engine or create_db_engine(app_settings.database_url)
    init_db(engine)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Incident tracker started (database: %s)", engine.url.render_as_string(hide_password=True))
        yield
        await app.state.incidents_client.aclose()
        engine.dispose()

    app = FastAPI(title="Incident Tracker API", lifespan=lifespan)
    app.state.settings = app_settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.incidents_client = IncidentsClient.for_app(app, base_url=app_settings.api_base_url)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=app_settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)

    app.include_router(incidents_read_router, prefix="/api")
    app.include_router(incidents_write_router, prefix="/api")
    app.include_router(web_router)

    @app.get("/api/healthcheck")
    async def healthcheck():
        return {"status": "ok"}

    return app
