# backend/routes/auth.py
from fastapi import APIRouter, Depends, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas import user as schemas
from services.directory import DirectoryService
from utils.audit import write_log
from utils.errors import UnauthenticatedError
from utils.tokenJWT import (
    decode_identity_assertion, open_session, close_session, purge_expired_sessions,
    get_current_user, get_current_sid,
)

router = APIRouter(tags=["Auth"])


# Exchange an identity-provider assertion for an access token
@router.post("/login", response_model=schemas.Token)
def login(payload: schemas.IdentityAssertion, request: Request, db: Session = Depends(get_db)):
    try:
        claims = decode_identity_assertion(payload.id_token)
    except UnauthenticatedError:
        write_log(db, user_id=None, action="LOGIN", resource="auth",
                  status="FAIL", request=request, meta={"reason": "invalid assertion"})
        raise

    # Create or refresh the account from the provider's claims
    user = DirectoryService(db).upsert_user({
        "id": claims["sub"],
        "email": claims.get("email"),
        "first_name": claims.get("first_name"),
        "last_name": claims.get("last_name"),
        "profile_image_url": claims.get("profile_image_url"),
    })

    purge_expired_sessions(db)
    access_token = open_session(db, user, claims)

    write_log(db, user_id=user.id, action="LOGIN", resource="auth",
              status="SUCCESS", request=request, meta={"email": user.email})

    return {"access_token": access_token, "token_type": "bearer"}


# End the session behind the current token
@router.post("/logout", status_code=status.HTTP_204_NO_CONTENT)
def logout(
    request: Request,
    sid: str = Depends(get_current_sid),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    close_session(db, sid)
    write_log(db, user_id=current_user.id, action="LOGOUT", resource="auth", request=request)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Retrieve current authenticated user details
@router.get("/me", response_model=schemas.UserResponse)
def me(current_user: User = Depends(get_current_user)):
    return current_user
