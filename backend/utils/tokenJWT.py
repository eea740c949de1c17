# utils/tokenJWT.py
import uuid
from datetime import datetime, timedelta
from typing import Optional

from jose import jwt, JWTError
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from models.session import AuthSession
from models.users import User
from services.policy import Actor, ensure_can_manage_users
from utils.errors import UnauthenticatedError

SECRET_KEY = settings.SECRET_KEY
ALGORITHM = settings.ALGORITHM
ACCESS_TOKEN_EXPIRE_MINUTES = settings.ACCESS_TOKEN_EXPIRE_MINUTES

# Authorization scheme; a missing header is reported by get_current_user
bearer_scheme = HTTPBearer(auto_error=False)

# Generate a new JWT access token
def create_access_token(data: dict, expires_delta: timedelta = None):
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


# Verify the assertion signed by the identity provider and return its claims
def decode_identity_assertion(id_token: str) -> dict:
    try:
        claims = jwt.decode(id_token, settings.IDP_SHARED_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        raise UnauthenticatedError("Invalid identity assertion")
    if not claims.get("sub"):
        raise UnauthenticatedError("Identity assertion has no subject")
    return claims


# Store a server-side session for the user and issue the matching access token
def open_session(db: Session, user: User, claims: Optional[dict] = None) -> str:
    sid = uuid.uuid4().hex
    db.add(AuthSession(
        sid=sid,
        sess={"user_id": user.id, "claims": claims or {}},
        expire=datetime.utcnow() + timedelta(hours=settings.SESSION_TTL_HOURS),
    ))
    db.commit()
    return create_access_token(data={"sub": user.id, "sid": sid})


def close_session(db: Session, sid: str) -> None:
    db.query(AuthSession).filter(AuthSession.sid == sid).delete(synchronize_session=False)
    db.commit()


def purge_expired_sessions(db: Session) -> int:
    removed = (
        db.query(AuthSession)
        .filter(AuthSession.expire < datetime.utcnow())
        .delete(synchronize_session=False)
    )
    db.commit()
    return removed


def _token_payload(credentials: Optional[HTTPAuthorizationCredentials]) -> dict:
    if credentials is None:
        raise UnauthenticatedError()
    try:
        payload = jwt.decode(credentials.credentials, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        raise UnauthenticatedError()
    # Ensure both the user and the session are present in the token payload
    if payload.get("sub") is None or payload.get("sid") is None:
        raise UnauthenticatedError()
    return payload


# Session id of the current request's token
def get_current_sid(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    return _token_payload(credentials)["sid"]


# Retrieve the currently authenticated user based on the JWT token and its session
def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db)
) -> User:
    payload = _token_payload(credentials)

    session = db.query(AuthSession).filter(AuthSession.sid == payload["sid"]).first()
    if session is None or session.expire < datetime.utcnow():
        raise UnauthenticatedError("Session expired")

    # Role is read from the database on every request
    user = db.query(User).filter(User.id == payload["sub"]).first()
    if user is None:
        raise UnauthenticatedError()
    return user


def get_current_actor(current_user: User = Depends(get_current_user)) -> Actor:
    return Actor.from_user(current_user)


# Dependency for admin-only routes
def require_admin(actor: Actor = Depends(get_current_actor)) -> Actor:
    ensure_can_manage_users(actor)
    return actor
