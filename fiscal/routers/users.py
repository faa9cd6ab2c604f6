"""Signup, login/logout, and the current user's profile."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from fiscal.auth import SESSION_COOKIE, CurrentUser, issue_session_token
from fiscal.config import settings
from fiscal.database import get_db
from fiscal.models import User
from fiscal.schemas import LoginRequest, SessionOut, SignupRequest, SuccessResponse, UserOut, UserUpdate
from fiscal.services import user_service

router = APIRouter(prefix="/v1/auth")


def _session_response(user: User, status_code: int = 200) -> JSONResponse:
    token = issue_session_token(user.id)
    body = SessionOut(token=token, user=UserOut.model_validate(user))
    response = JSONResponse(status_code=status_code, content=body.model_dump(mode="json"))
    response.set_cookie(
        SESSION_COOKIE, token,
        max_age=settings.session_max_age, httponly=True, samesite="lax",
    )
    return response


@router.post("/signup", response_model=SessionOut, status_code=201)
async def signup(body: SignupRequest, db: Session = Depends(get_db)):
    user = user_service.signup(db, body)
    return _session_response(user, status_code=201)


@router.post("/login", response_model=SessionOut)
async def login(body: LoginRequest, db: Session = Depends(get_db)):
    user = user_service.authenticate(db, body.email, body.password)
    return _session_response(user)


@router.post("/logout", response_model=SuccessResponse)
async def logout():
    response = JSONResponse(content=SuccessResponse().model_dump())
    response.delete_cookie(SESSION_COOKIE)
    return response


@router.get("/me", response_model=UserOut)
async def me(user: User = CurrentUser):
    return UserOut.model_validate(user)


@router.patch("/me", response_model=UserOut)
async def update_me(body: UserUpdate, user: User = CurrentUser, db: Session = Depends(get_db)):
    return UserOut.model_validate(user_service.update_profile(db, user, body))


@router.delete("/me", response_model=SuccessResponse)
async def delete_me(user: User = CurrentUser, db: Session = Depends(get_db)):
    user_service.delete_user(db, user)
    response = JSONResponse(content=SuccessResponse().model_dump())
    response.delete_cookie(SESSION_COOKIE)
    return response
