import logging
from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from app.api.deps import get_bearer_token, get_current_user, get_db
from app.api.params import bad_request, non_empty_str, parse_email
from app.config import settings
from app.crud import create_auth_session, create_user, delete_auth_session, get_user_by_email
from app.models import User
from app.schemas import UserOut
from app.security import hash_password, verify_password

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["auth"])

MIN_PASSWORD_LENGTH = 8


def _session_response(db: Session, user: User) -> Dict[str, Any]:
    auth_session = create_auth_session(db, user, settings.SESSION_TTL_DAYS)
    return {
        "user": UserOut.model_validate(user).to_json(),
        "token": auth_session.token,
        "expiresAt": auth_session.expires_at.isoformat() + "Z",
    }


@router.post("/sign-up", status_code=201)
def sign_up(payload: Dict[str, Any], db: Session = Depends(get_db)) -> Dict[str, Any]:
    email = parse_email(payload.get("email"))
    if not email:
        raise bad_request("Valid email is required")

    password = payload.get("password")
    if not isinstance(password, str) or len(password) < MIN_PASSWORD_LENGTH:
        raise bad_request(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")

    if get_user_by_email(db, email):
        raise bad_request("Email already registered")

    user = create_user(db, email, hash_password(password), non_empty_str(payload.get("name")))
    logger.info("Registered user %s", user.id)
    return _session_response(db, user)


@router.post("/sign-in")
def sign_in(payload: Dict[str, Any], db: Session = Depends(get_db)) -> Dict[str, Any]:
    email = parse_email(payload.get("email"))
    password = payload.get("password")
    if not email or not isinstance(password, str):
        raise bad_request("Email and password are required")

    user = get_user_by_email(db, email)
    if not user or not verify_password(user.password_hash, password):
        logger.info("Rejected sign-in attempt")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    return _session_response(db, user)


@router.post("/sign-out")
def sign_out(token: str = Depends(get_bearer_token), db: Session = Depends(get_db)) -> Dict[str, bool]:
    return {"signedOut": delete_auth_session(db, token)}


@router.get("/session")
def current_session(user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": UserOut.model_validate(user).to_json()}
