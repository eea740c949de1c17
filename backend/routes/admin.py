# backend/routes/admin.py
from fastapi import APIRouter, Depends, Request, Response, status
from typing import List
from sqlalchemy.orm import Session

from database import get_db
from schemas.resident import UserWithResident
from schemas.user import RoleUpdate, UserResponse
from services.directory import DirectoryService
from services.policy import Actor
from utils.audit import write_log
from utils.errors import DirectoryError
from utils.tokenJWT import require_admin

router = APIRouter(tags=["Admin"])


# Every account with its resident profile, newest first (Admin only)
@router.get("/admin/users", response_model=List[UserWithResident])
def get_all_users(
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    return DirectoryService(db).list_all_users()


# Update user role (Admin only)
@router.put("/admin/users/{user_id}/role", response_model=UserResponse)
def update_user_role(
    user_id: str,
    new_role: RoleUpdate,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    user = DirectoryService(db).update_user_role(user_id, new_role.role)
    write_log(db, user_id=admin.id, action="ROLE_CHANGE", resource="users",
              request=request, meta={"target_user_id": user_id, "role": user.role})
    return user


# Delete a user account together with its resident profile (Admin only)
@router.delete("/admin/users/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    try:
        DirectoryService(db).delete_user(user_id, admin.id)
    except DirectoryError as e:
        write_log(db, user_id=admin.id, action="USER_DELETE", resource="users", status="FAIL",
                  request=request, meta={"target_user_id": user_id, "reason": e.message})
        raise

    write_log(db, user_id=admin.id, action="USER_DELETE", resource="users",
              request=request, meta={"target_user_id": user_id})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Full CSV dump of every resident, hidden profiles included (Admin only)
@router.get("/export/residents")
def export_residents(
    request: Request,
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    csv_data = DirectoryService(db).export_residents_csv()
    write_log(db, user_id=admin.id, action="EXPORT", resource="residents", request=request)
    return Response(
        content=csv_data,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="village_residents.csv"'},
    )
