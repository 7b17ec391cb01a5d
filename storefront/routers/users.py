from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from storefront.core.dependencies import get_db
from storefront.schemas import LoginResponse, UserLogin, UsernameRead, UserRead, UserRegister
from storefront.services import UserService
from storefront.services import exceptions as service_exceptions

router = APIRouter(prefix="/users", tags=["users"])


@router.post("/login", response_model=LoginResponse)
def login(payload: UserLogin, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.authenticate(email=payload.email, password=payload.password)
    except service_exceptions.AuthenticationError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc)) from exc
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Server error") from exc
    return LoginResponse(user_id=user.id)


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(payload: UserRegister, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.register(
            username=payload.username,
            email=payload.email,
            password=payload.password,
        )
    except service_exceptions.ServiceError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UsernameRead)
def get_user(user_id: str, db: Session = Depends(get_db)):
    service = UserService(db)
    try:
        user = service.get_user(user_id)
    except service_exceptions.NotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except service_exceptions.PersistenceError as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail="Error fetching user"
        ) from exc
    return UsernameRead(username=user.username)
