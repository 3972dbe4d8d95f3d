from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from sqlalchemy.orm import Session
from ..core.db import get_db
from ..core.errors import Unauthorized
from ..core.security import decode_token
from ..models import User

bearer = HTTPBearer(auto_error=False)

def get_current_user(
    creds: HTTPAuthorizationCredentials = Depends(bearer),
    db: Session = Depends(get_db),
) -> User:
    if creds is None or not creds.credentials:
        raise Unauthorized("Missing Authorization Bearer token")
    try:
        payload = decode_token(creds.credentials)
    except JWTError:
        raise Unauthorized("Invalid token")
    if payload.get("typ") != "access":
        raise Unauthorized("Invalid token type")
    user_id = payload.get("sub")
    user = db.get(User, user_id) if user_id else None
    if not user:
        raise Unauthorized("User not found")
    return user
