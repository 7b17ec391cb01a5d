import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, UploadFile, status
from pydantic import ValidationError
from sqlalchemy.orm import Session

from storefront.core.config import Settings
from storefront.core.dependencies import get_app_settings, get_db, get_image_store
from storefront.core.storage import ImageStore
from storefront.schemas import ProductCreate, ProductRead, ProductUpdate
from storefront.services import ProductService
from storefront.services import exceptions as service_exceptions

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/products", tags=["products"])


def _product_form(
    name: Optional[str] = Form(default=None),
    code: Optional[str] = Form(default=None),
    price: Optional[str] = Form(default=None),
    categories: Optional[str] = Form(default=None),
    more_details: Optional[str] = Form(default=None, alias="moreDetails"),
    reviews: Optional[str] = Form(default=None),
    shipping_time: Optional[str] = Form(default=None, alias="shippingTime"),
    url: Optional[str] = Form(default=None),
) -> ProductCreate:
    try:
        return ProductCreate(
            name=name,
            code=code,
            price=price,
            categories=categories,
            more_details=more_details,
            reviews=reviews,
            shipping_time=shipping_time,
            url=url,
        )
    except ValidationError as exc:
        logger.warning("Rejected product form: %s", exc.errors())
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid product fields") from exc


def _read_uploads(images: Optional[list[UploadFile]]) -> list[tuple[str, bytes]]:
    uploads: list[tuple[str, bytes]] = []
    for upload in images or []:
        if not upload.filename:
            continue
        uploads.append((upload.filename, upload.file.read()))
    return uploads


def _service(db: Session, store: ImageStore | None = None, settings: Settings | None = None) -> ProductService:
    if settings is None:
        return ProductService(db, store)
    return ProductService(db, store, max_images=settings.MAX_PRODUCT_IMAGES)


@router.get("", response_model=list[ProductRead])
def list_products(db: Session = Depends(get_db)):
    service = _service(db)
    try:
        products = service.list_products()
    except service_exceptions.PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return [ProductRead.model_validate(product) for product in products]


@router.get("/{product_id}", response_model=ProductRead)
def get_product(product_id: str, db: Session = Depends(get_db)):
    service = _service(db)
    try:
        product = service.get_product(product_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except service_exceptions.PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def create_product(
    payload: ProductCreate = Depends(_product_form),
    images: Optional[list[UploadFile]] = File(default=None),
    db: Session = Depends(get_db),
    store: ImageStore = Depends(get_image_store),
    settings: Settings = Depends(get_app_settings),
):
    service = _service(db, store, settings)
    try:
        product = service.create_product(data=payload.model_dump(), uploads=_read_uploads(images))
    except service_exceptions.ServiceError as exc:
        logger.error("Error creating product: %s", exc)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.put("/{product_id}", response_model=ProductRead)
def update_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    service = _service(db)
    try:
        product = service.update_product(product_id=product_id, data=payload.model_dump())
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.patch("/{product_id}", response_model=ProductRead)
def patch_product(product_id: str, payload: ProductUpdate, db: Session = Depends(get_db)):
    service = _service(db)
    try:
        product = service.patch_product(product_id=product_id, data=payload.model_dump(exclude_unset=True))
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return ProductRead.model_validate(product)


@router.delete("/{product_id}", response_model=ProductRead)
def delete_product(product_id: str, db: Session = Depends(get_db)):
    service = _service(db)
    try:
        product = service.delete_product(product_id=product_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except service_exceptions.PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return ProductRead.model_validate(product)
