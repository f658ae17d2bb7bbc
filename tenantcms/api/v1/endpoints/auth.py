# tenantcms/api/v1/endpoints/auth.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy import select
from sqlalchemy.orm import Session

from tenantcms.core.errors import Forbidden, Unauthorized
from tenantcms.db.session import get_db
from tenantcms.deps.auth import get_current_user
from tenantcms.models.auth import User
from tenantcms.schemas.admin import LoginIn, TokenOut, UserOut
from tenantcms.security.jwt import create_access_token
from tenantcms.services.passwords import verify_password

log = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])  # prefix set in api/v1/router.py


@router.post("/login", response_model=TokenOut)
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)):
    user = db.scalar(select(User).where(User.email == payload.email))
    if not user or not verify_password(payload.password, user.hashed_password or ""):
        raise Unauthorized("Invalid credentials")
    if not user.is_active:
        raise Forbidden("User inactive")

    # a fresh login never inherits a previous principal's tenant override
    request.session.clear()
    extra = {"email": user.email, "role": user.role.value}
    return TokenOut(access_token=create_access_token(user.id, extra))


@router.get("/me", response_model=UserOut)
def me(current_user: User = Depends(get_current_user)):
    return current_user


@router.post("/logout", status_code=204)
def logout(request: Request):
    # JWT is stateless; the session (tenant override) is dropped server side
    request.session.clear()
    return Response(status_code=204)
