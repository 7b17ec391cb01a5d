from fastapi import APIRouter

from . import categories, files, health, products, users


def get_api_router() -> APIRouter:
    router = APIRouter()
    router.include_router(health.router)
    router.include_router(products.router)
    router.include_router(categories.router)
    router.include_router(users.router)
    return router


def get_files_router() -> APIRouter:
    return files.router
