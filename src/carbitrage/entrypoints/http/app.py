from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from carbitrage.entrypoints.http.exception_handlers import register_exception_handlers
from carbitrage.entrypoints.http.routes.health import router as health_router
from carbitrage.entrypoints.http.routes.vehicles import router as vehicles_router
from carbitrage.infra.config import cors_origins
from carbitrage.infra.logging_config import configure_logging


def build_app() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title="Carbitrage API",
        description="""
        Used-vehicle search API ranked by arbitrage score.

        ## Features
        - Search listings with filters, sorting, pagination and facets
        - Type-ahead suggestions and filter options
        - Vehicle details, similar and featured listings

        ## Authentication
        Search endpoints are public.

        ## Error Handling
        All errors return structured JSON responses with error codes.
        See the error response schemas in the API documentation.
        """,
        version="0.1.0",
        docs_url="/docs",  # Swagger UI
        redoc_url="/redoc",  # ReDoc alternative
        openapi_url="/openapi.json",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    register_exception_handlers(app)

    app.include_router(health_router)
    app.include_router(vehicles_router, prefix="/v1")

    return app


app = build_app()
