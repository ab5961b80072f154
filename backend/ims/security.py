"""Password hashing and JWT helpers."""
import secrets
from datetime import datetime, timedelta

import bcrypt
from jose import jwt

ALGORITHM = "HS256"


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash.

    Rows written by the legacy browser client hold plaintext passwords; those
    are compared exactly.
    """
    if not hashed_password:
        return False
    if not hashed_password.startswith("$2"):
        return secrets.compare_digest(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    try:
        return bcrypt.checkpw(plain_password.encode('utf-8'), hashed_password.encode('utf-8'))
    except ValueError:
        return False


def get_password_hash(password: str) -> str:
    """Hash a password."""
    return bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt()).decode('utf-8')


def create_access_token(data: dict, secret_key: str, expires_delta: timedelta | None = None) -> str:
    """Create a JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=15))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, secret_key, algorithm=ALGORITHM)


def decode_access_token(token: str, secret_key: str) -> dict:
    """Decode a JWT; raises ``jose.JWTError`` when invalid or expired."""
    return jwt.decode(token, secret_key, algorithms=[ALGORITHM])
