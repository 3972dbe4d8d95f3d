import hashlib
import secrets
from datetime import datetime, timedelta, timezone

from jose import jwt
from passlib.context import CryptContext

from .config import settings

pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

ALGORITHM = "HS256"


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(password: str, password_hash: str) -> bool:
    return pwd_context.verify(password, password_hash)


def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _encode(user_id: str, typ: str, expires_at: datetime, jti: str) -> str:
    payload = {
        "sub": user_id,
        "iss": settings.JWT_ISSUER,
        "aud": settings.JWT_AUDIENCE,
        "iat": int(_now().timestamp()),
        "exp": int(expires_at.timestamp()),
        "typ": typ,
        "jti": jti,
    }
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=ALGORITHM)


def create_access_token(user_id: str) -> tuple[str, int]:
    ttl = int(settings.JWT_ACCESS_TTL_SECONDS)
    token = _encode(user_id, "access", _now() + timedelta(seconds=ttl), secrets.token_urlsafe(32))
    return token, ttl


def create_refresh_token(user_id: str) -> tuple[str, datetime, str]:
    """Returns (token, expiry, jti); only the sha256 of the jti is stored server-side."""
    exp = _now() + timedelta(days=int(settings.JWT_REFRESH_TTL_DAYS))
    jti = secrets.token_urlsafe(32)
    return _encode(user_id, "refresh", exp, jti), exp, jti


def decode_token(token: str) -> dict:
    return jwt.decode(
        token,
        settings.JWT_SECRET,
        algorithms=[ALGORITHM],
        audience=settings.JWT_AUDIENCE,
        issuer=settings.JWT_ISSUER,
    )
