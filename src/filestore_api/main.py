from textwrap import dedent
import logging

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.routing import APIRoute
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException as StarletteHTTPException

from filestore_api import __version__
from filestore_api.errors import (
    FileStorageError,
    handle_broad_exceptions,
    handle_file_storage_error,
    handle_http_exceptions,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
)
from filestore_api.routers.files import router as files_router
from filestore_api.routers.health import router as health_router
from filestore_api.config.settings import Settings
from filestore_api.storage import (
    CountEngine,
    RegexListingEngine,
    StorageEngine,
    init_storage,
)

# Set up logging
logger = logging.getLogger(__name__)


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()

    app = FastAPI(
        title="File Storage API",
        summary="Store, update, download, delete and search files",
        version=__version__,
        description=dedent(
            """\
        Files are stored on local disk, spread over shard directories named
        after the first two hex characters of the SHA-256 of the file name.

        | Endpoint | Notes |
        | --- | --- |
        | `POST /v1/files/upload` | Uploading an existing name keeps the stored file |
        | `PUT /v1/files/update/{file_name}` | The file must already exist |
        | `GET /v1/files/search` | `regex` must match the whole file name |
        """
        ),
        docs_url="/",  # its easier to find the docs when they live on the base url
        generate_unique_id_function=custom_generate_unique_id,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    logger.info(f"initializing storage at {settings.storage_dir}")
    storage_root = init_storage(settings.storage_path)

    app.state.settings = settings
    app.state.storage_engine = StorageEngine(storage_root)
    app.state.listing_engine = RegexListingEngine(storage_root, max_workers=settings.count_workers)
    app.state.count_engine = CountEngine(storage_root)

    app.include_router(files_router, prefix="/v1", tags=["files"])
    app.include_router(health_router, tags=["health"])

    app.add_exception_handler(FileStorageError, handle_file_storage_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(StarletteHTTPException, handle_http_exceptions)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.middleware("http")(handle_broad_exceptions)

    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    import uvicorn

    app = create_app()
    uvicorn.run(app, host="0.0.0.0", port=8000)
