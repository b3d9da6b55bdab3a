from datetime import datetime, timedelta, timezone
from typing import Optional, Dict, Any
from jose import JWTError, jwt
import bcrypt
from fastapi import HTTPException, status

from trackerpro.core.config import settings

# Bcrypt only looks at the first 72 bytes of input
BCRYPT_MAX_BYTES = 72


class BcryptPasswordHasher:
    """One-way password hashing with a random per-hash salt"""

    def __init__(self, rounds: int = 12):
        self.rounds = rounds

    def hash(self, password: str) -> str:
        """Hash password with the configured cost factor"""
        password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
        hashed = bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=self.rounds))
        return hashed.decode('utf-8')

    def verify(self, password: str, hashed_password: Optional[str]) -> bool:
        """Verify password; a missing or malformed digest never matches"""
        if not hashed_password:
            return False
        password_bytes = password.encode('utf-8')[:BCRYPT_MAX_BYTES]
        try:
            return bcrypt.checkpw(password_bytes, hashed_password.encode('utf-8'))
        except ValueError:
            return False


password_hasher = BcryptPasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def create_access_token(
    data: Dict[str, Any],
    expires_delta: Optional[timedelta] = None
) -> str:
    """Create JWT access token"""
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})
    encoded_jwt = jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)
    return encoded_jwt


def token_lifetime(remember_me: bool = False) -> timedelta:
    """Access token lifetime for a login request"""
    if remember_me:
        return timedelta(days=settings.REMEMBER_ME_EXPIRE_DAYS)
    return timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)


def decode_token(token: str) -> Dict[str, Any]:
    """Decode JWT token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        return payload
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
