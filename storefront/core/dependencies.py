from fastapi import Depends, Request
from sqlalchemy.orm import Session

from storefront.core.config import Settings, get_settings
from storefront.core.db import get_db_session
from storefront.core.storage import ImageStore


def get_db() -> Session:
    yield from get_db_session()


def get_app_settings(request: Request) -> Settings:
    return getattr(request.app.state, "settings", None) or get_settings()


def get_image_store(request: Request, settings: Settings = Depends(get_app_settings)) -> ImageStore:
    store = getattr(request.app.state, "image_store", None)
    if store is None:
        store = ImageStore(settings.UPLOAD_DIR)
        request.app.state.image_store = store
    return store
