from fastapi import APIRouter, Depends
from jose import JWTError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from datetime import datetime
from ...core.db import get_db
from ...core.errors import Conflict, NotFound, Unauthorized
from ...core.security import (
    hash_password, verify_password,
    create_access_token, create_refresh_token, decode_token, sha256_hex
)
from ...models import User, RefreshToken
from ..deps import get_current_user
from ..schemas import (
    SignupRequest, LoginRequest, AuthResponse, AuthData, TokenBundle, UserOut,
    UserResponse, RefreshRequest, LogoutRequest,
)

router = APIRouter(prefix="/auth", tags=["auth"])


def _user_out(user: User) -> UserOut:
    return UserOut(
        id=user.id,
        username=user.username,
        email=user.email,
        createdAt=user.created_at.replace(microsecond=0).isoformat() + "Z",
    )


def _store_refresh(db: Session, user: User) -> tuple[str, str, int]:
    access, ttl = create_access_token(user.id)
    refresh, exp, jti = create_refresh_token(user.id)
    db.add(RefreshToken(user_id=user.id, token_jti=sha256_hex(jti), expires_at=exp.replace(tzinfo=None)))
    return access, refresh, ttl


def _issue_tokens(db: Session, user: User, message: str) -> AuthResponse:
    access, refresh, ttl = _store_refresh(db, user)
    db.commit()
    return AuthResponse(
        message=message,
        data=AuthData(
            user=_user_out(user),
            token=TokenBundle(accessToken=access, refreshToken=refresh, expiresIn=ttl),
        ),
    )


@router.post("/signup", response_model=AuthResponse, status_code=201)
def signup(req: SignupRequest, db: Session = Depends(get_db)):
    user = User(
        username=req.username.strip(),
        email=req.email.lower().strip() if req.email else None,
        password_hash=hash_password(req.password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise Conflict("Username already used", is_form_error=True)
    db.refresh(user)
    return _issue_tokens(db, user, "User created")


@router.post("/login", response_model=AuthResponse)
def login(req: LoginRequest, db: Session = Depends(get_db)):
    user = db.query(User).filter(User.username == req.username.strip()).first()
    if not user:
        raise Unauthorized("Incorrect username", is_form_error=True)
    if not verify_password(req.password, user.password_hash):
        raise Unauthorized("Incorrect password", is_form_error=True)
    return _issue_tokens(db, user, "Logged in")


@router.post("/refresh", response_model=AuthResponse)
def refresh(req: RefreshRequest, db: Session = Depends(get_db)):
    try:
        payload = decode_token(req.refreshToken)
    except JWTError:
        raise Unauthorized("Invalid refresh token")
    if payload.get("typ") != "refresh":
        raise Unauthorized("Invalid token type")
    user_id = payload.get("sub")
    jti = payload.get("jti")
    if not user_id or not jti:
        raise Unauthorized("Invalid refresh token payload")

    token_row = db.query(RefreshToken).filter(RefreshToken.token_jti == sha256_hex(jti)).first()
    if not token_row or token_row.revoked:
        raise Unauthorized("Refresh token revoked")
    if token_row.expires_at < datetime.utcnow():
        raise Unauthorized("Refresh token expired")

    user = db.get(User, user_id)
    if not user:
        raise Unauthorized("User not found")

    # rotate
    token_row.revoked = True
    return _issue_tokens(db, user, "Token refreshed")


@router.post("/logout")
def logout(req: LogoutRequest, db: Session = Depends(get_db)):
    # idempotent revoke
    try:
        payload = decode_token(req.refreshToken)
    except JWTError:
        return {"success": True, "message": "Logged out"}
    jti = payload.get("jti")
    if payload.get("typ") == "refresh" and jti:
        row = db.query(RefreshToken).filter(RefreshToken.token_jti == sha256_hex(jti)).first()
        if row:
            row.revoked = True
            db.commit()
    return {"success": True, "message": "Logged out"}


@router.get("/me", response_model=UserResponse)
def me(user: User = Depends(get_current_user)):
    return UserResponse(message="User fetched", data={"user": _user_out(user).model_dump()})


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db)):
    user = db.get(User, user_id)
    if not user:
        raise NotFound("user doesn't exist", is_form_error=True)
    return UserResponse(message="User fetched", data={"user": _user_out(user).model_dump()})
