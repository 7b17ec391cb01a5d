from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.dependencies import get_db
from storefront.schemas import CategoryCreate, CategoryRead
from storefront.services import CategoryService
from storefront.services import exceptions as service_exceptions

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=list[CategoryRead])
def list_categories(db: Session = Depends(get_db)):
    service = CategoryService(db)
    try:
        categories = service.list_categories()
    except service_exceptions.PersistenceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return [CategoryRead.model_validate(category) for category in categories]


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def create_category(payload: CategoryCreate, db: Session = Depends(get_db)):
    service = CategoryService(db)
    try:
        category = service.create_category(data=payload.model_dump())
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return CategoryRead.model_validate(category)
