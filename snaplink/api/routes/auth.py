"""Login endpoint exchanging an identity token for a session token."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from snaplink.api import schemas
from snaplink.api.dependencies import get_auth_service
from snaplink.db.session import get_db
from snaplink.services.auth import AuthService
from snaplink.services.exceptions import InvalidTokenError

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/login",
    response_model=schemas.LoginResponse,
    responses={401: {"model": schemas.ErrorResponse, "description": "Identity token rejected"}}
)
async def login(
    payload: schemas.LoginRequest,
    db: AsyncSession = Depends(get_db),
    auth_service: AuthService = Depends(get_auth_service),
):
    try:
        token, user = await auth_service.login(db, payload.token)
    except InvalidTokenError as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(e))
    return schemas.LoginResponse(token=token, user=schemas.UserResponse.model_validate(user))
