import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from storefront.core.config import Settings, get_settings
from storefront.core.database_init import init_database_schema
from storefront.core.db import configure_database
from storefront.core.logging import configure_logging
from storefront.core.middleware import RequestContextMiddleware
from storefront.core.storage import ImageStore
from storefront.routers import get_api_router, get_files_router


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    configure_logging(settings)

    logger = logging.getLogger("storefront.validation")

    app = FastAPI(title=settings.PROJECT_NAME)
    app.state.settings = settings
    app.state.image_store = ImageStore(settings.UPLOAD_DIR)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(RequestContextMiddleware)

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        body_bytes = await request.body()
        body_text = body_bytes.decode("utf-8", errors="replace") if body_bytes else ""
        logger.error(
            "Validation error on %s %s body=%s detail=%s",
            request.method,
            request.url.path,
            body_text,
            exc.errors(),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": jsonable_errors(exc)},
        )

    app.include_router(get_api_router(), prefix=settings.API_PREFIX)
    app.include_router(get_files_router(), prefix=settings.UPLOAD_URL_PREFIX)

    if settings.PUBLIC_DIR.is_dir():
        app.mount("/", StaticFiles(directory=settings.PUBLIC_DIR, html=True), name="public")

    @app.on_event("startup")
    def startup_event():
        init_database_schema(configure_database(settings.DATABASE_URL))

    return app


def jsonable_errors(exc: RequestValidationError) -> list[dict]:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


app = create_app()
