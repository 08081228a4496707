"""User API endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from cheese_api.api.dependencies import get_current_user
from cheese_api.api.formats import negotiate_format, render
from cheese_api.config import get_settings
from cheese_api.database import get_db
from cheese_api.exceptions import InvalidCredentials
from cheese_api.models.user import User
from cheese_api.schemas.user import PasswordChange, UserCreate, UserUpdate, user_view
from cheese_api.services import auth as auth_service

settings = get_settings()

router = APIRouter(prefix="/api/users", tags=["users"])


def get_user_or_404(db: Session, user_id: int) -> User:
    """Get a user or raise 404."""
    user = auth_service.get_user(db, user_id)
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Not Found")
    return user


@router.post("", status_code=status.HTTP_201_CREATED)
def register(
    user_data: UserCreate,
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Register a new user."""
    user = auth_service.create_user(db, user_data.email, user_data.password)
    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content=jsonable_encoder(user_view(user, None)),
    )


@router.get("")
def get_users(
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
    page: int = Query(default=1, ge=1),
) -> Response:
    """List users, paginated like listings."""
    media_type = negotiate_format(request)
    per_page = settings.items_per_page
    query = db.query(User)
    total = query.count()
    users = query.order_by(User.id).offset((page - 1) * per_page).limit(per_page).all()
    rows = [user_view(user, current_user) for user in users]
    return render(rows, media_type, title="Users", headers={"X-Total-Count": str(total)})


@router.get("/{user_id}")
def get_user(
    user_id: int,
    request: Request,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Get a specific user."""
    media_type = negotiate_format(request)
    user = get_user_or_404(db, user_id)
    return render(user_view(user, current_user), media_type, title=user.email)


@router.put("/{user_id}")
def update_user(
    user_id: int,
    user_data: UserUpdate,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> JSONResponse:
    """Update a user (self or admin). The password is left as stored."""
    user = get_user_or_404(db, user_id)
    if user.id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only edit your own account",
        )

    user = auth_service.update_user(db, user, email=user_data.email)
    return JSONResponse(content=jsonable_encoder(user_view(user, current_user)))


@router.put("/{user_id}/password", status_code=status.HTTP_204_NO_CONTENT)
def change_password(
    user_id: int,
    password_data: PasswordChange,
    current_user: Annotated[User, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> Response:
    """Change the caller's own password."""
    user = get_user_or_404(db, user_id)
    if user.id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only change your own password",
        )

    try:
        auth_service.change_password(
            db, user, password_data.current_password, password_data.new_password
        )
    except InvalidCredentials as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e

    return Response(status_code=status.HTTP_204_NO_CONTENT)
