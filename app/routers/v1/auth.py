from typing import Annotated
from fastapi import APIRouter, Depends, HTTPException, status

from app.core.clock import Clock
from app.core.deps import get_clock, get_user_repo
from app.database.user_repo import UserRepo
from app.schemas.auth import LoginRequest, TokenResponse
from app.services.auth_service import AuthService

router = APIRouter()

UserRepoDep = Annotated[UserRepo, Depends(get_user_repo)]
ClockDep = Annotated[Clock, Depends(get_clock)]


@router.post("/login", response_model=TokenResponse)
async def login_endpoint(data: LoginRequest, users: UserRepoDep, clock: ClockDep):
    try:
        token = await AuthService.login(data.username, data.password, users, clock())
    except ValueError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    return TokenResponse(jwt=token)
