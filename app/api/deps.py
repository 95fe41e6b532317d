from typing import Iterator, Optional

from fastapi import Depends, Header, HTTPException
from sqlalchemy.orm import Session

from app import clock
from app.crud import get_user_for_token
from app.db import SessionLocal
from app.models import User


def get_db() -> Iterator[Session]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def _unauthorized() -> HTTPException:
    return HTTPException(status_code=401, detail="Unauthorized", headers={"WWW-Authenticate": "Bearer"})


def get_bearer_token(authorization: Optional[str] = Header(default=None)) -> str:
    if not authorization:
        raise _unauthorized()
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise _unauthorized()
    return token.strip()


def get_current_user(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)) -> User:
    user = get_user_for_token(db, token, clock.utcnow())
    if not user:
        raise _unauthorized()
    return user
