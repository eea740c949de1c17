# backend/routes/residents.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, Response, status
from sqlalchemy.orm import Session

from database import get_db
from models.users import User
from schemas.resident import ResidentCreate, ResidentUpdate, ResidentOut, ResidentWithUser
from services.directory import DirectoryService
from services.policy import Actor
from utils.audit import write_log
from utils.errors import DirectoryError
from utils.tokenJWT import get_current_user, get_current_actor

router = APIRouter(prefix="/residents", tags=["Residents"])


# Directory listing of visible residents
@router.get("", response_model=List[ResidentWithUser])
def list_residents(
    location: Optional[str] = Query(None, description="village / city / abroad"),
    search: Optional[str] = Query(None, description="Name, phone or company"),
    occupation: Optional[str] = Query(None),
    returning: bool = Query(False, description="Expected back this month"),
    away_long: bool = Query(False, description="Away for more than a year"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DirectoryService(db).list_residents({
        "location": location,
        "search": search,
        "occupation": occupation,
        "returning": returning,
        "away_long": away_long,
    })


# Own profile; null when the user has not created one yet
@router.get("/me", response_model=Optional[ResidentWithUser])
def my_resident(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DirectoryService(db).get_resident_by_user(current_user.id)


@router.get("/{resident_id}", response_model=ResidentWithUser)
def get_resident(
    resident_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return DirectoryService(db).get_resident(resident_id)


@router.post("", response_model=ResidentOut, status_code=status.HTTP_201_CREATED)
def create_resident(
    payload: ResidentCreate,
    request: Request,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        resident = DirectoryService(db).create_resident(current_user.id, payload)
    except DirectoryError as e:
        write_log(db, user_id=current_user.id, action="RESIDENT_CREATE", resource="residents", status="FAIL",
                  request=request, meta={"reason": e.message})
        raise

    write_log(db, user_id=current_user.id, action="RESIDENT_CREATE", resource="residents",
              request=request, meta={"resident_id": resident.id})
    return resident


@router.put("/{resident_id}", response_model=ResidentOut)
def update_resident(
    resident_id: int,
    payload: ResidentUpdate,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    try:
        resident = DirectoryService(db).update_resident(resident_id, actor, payload)
    except DirectoryError as e:
        write_log(db, user_id=actor.id, action="RESIDENT_UPDATE", resource="residents", status="FAIL",
                  request=request, meta={"resident_id": resident_id, "reason": e.message})
        raise

    write_log(db, user_id=actor.id, action="RESIDENT_UPDATE", resource="residents",
              request=request, meta={"resident_id": resident_id})
    return resident


@router.delete("/{resident_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_resident(
    resident_id: int,
    request: Request,
    db: Session = Depends(get_db),
    actor: Actor = Depends(get_current_actor),
):
    try:
        DirectoryService(db).delete_resident(resident_id, actor)
    except DirectoryError as e:
        write_log(db, user_id=actor.id, action="RESIDENT_DELETE", resource="residents", status="FAIL",
                  request=request, meta={"resident_id": resident_id, "reason": e.message})
        raise

    write_log(db, user_id=actor.id, action="RESIDENT_DELETE", resource="residents",
              request=request, meta={"resident_id": resident_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)
