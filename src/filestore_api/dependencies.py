"""FastAPI dependency providers. The engines are built once by `create_app` and kept on `app.state`."""

from fastapi import Request

from filestore_api.config.settings import Settings
from filestore_api.storage import CountEngine, RegexListingEngine, StorageEngine


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_storage_engine(request: Request) -> StorageEngine:
    return request.app.state.storage_engine


def get_listing_engine(request: Request) -> RegexListingEngine:
    return request.app.state.listing_engine


def get_count_engine(request: Request) -> CountEngine:
    return request.app.state.count_engine
