from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from app.clock import utcnow
from app.models import AuthSession, User
from app.security import new_session_token


def normalize_email(email: str) -> str:
    return email.strip().lower()


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.scalar(select(User).where(User.id == user_id))


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalar(select(User).where(User.email == normalize_email(email)))


def create_user(db: Session, email: str, password_hash: str, name: Optional[str] = None) -> User:
    user = User(email=normalize_email(email), password_hash=password_hash, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def create_auth_session(db: Session, user: User, ttl_days: int) -> AuthSession:
    auth_session = AuthSession(
        token=new_session_token(),
        user_id=user.id,
        expires_at=utcnow() + timedelta(days=ttl_days),
    )
    db.add(auth_session)
    db.commit()
    db.refresh(auth_session)
    return auth_session


def get_user_for_token(db: Session, token: str, now: datetime) -> Optional[User]:
    return db.scalar(
        select(User)
        .join(AuthSession, AuthSession.user_id == User.id)
        .where(AuthSession.token == token, AuthSession.expires_at > now)
    )


def delete_auth_session(db: Session, token: str) -> bool:
    result = db.execute(delete(AuthSession).where(AuthSession.token == token))
    db.commit()
    return bool(result.rowcount)
