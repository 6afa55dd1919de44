from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
from fastapi import Header, HTTPException, status

from hrforms.core.config import settings


ALGORITHM = "HS256"


def create_jwt(payload: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = payload.copy()
    if expires_delta is None:
        expires_delta = timedelta(hours=12)
    exp = datetime.now(timezone.utc) + expires_delta
    to_encode.update({"exp": exp})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_jwt(token: str) -> dict:
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
    except jwt.PyJWTError as exc:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token") from exc


async def get_current_user(authorization: Optional[str] = Header(None)):
    if not authorization or not authorization.lower().startswith("bearer "):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
    token = authorization.split(" ", 1)[1]
    payload = decode_jwt(token)
    uid = payload.get("sub")
    user_code = payload.get(settings.ENTERED_BY_CLAIM)
    # Every submission is stamped with the user code, so a token without one is useless here
    if not uid or not user_code:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token payload")
    return {
        "id": str(uid),
        "user_code": str(user_code),
        "name": payload.get("name", ""),
        "role": payload.get("role", "hr"),
    }
