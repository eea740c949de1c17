# backend/routes/logs.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional, Any
from datetime import datetime
from pydantic import BaseModel, ConfigDict

from database import get_db
from models.log import Log
from services.policy import Actor
from utils.errors import ValidationError
from utils.tokenJWT import require_admin

router = APIRouter(prefix="/logs", tags=["Logs"])

# --- SCHEMAS ---
class LogResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: Optional[str] = None
    action: str
    resource: str
    status: str
    ip: Optional[str] = None
    ts: Optional[datetime] = None
    meta: Optional[Any] = None

class LogPage(BaseModel):
    items: List[LogResponse]
    total: int
    page: int
    page_size: int


def _parse_day(value: str, field: str, end_of_day: bool = False) -> datetime:
    # Whole-day bound when only YYYY-MM-DD is given
    if len(value) == 10 and end_of_day:
        value += " 23:59:59"
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        raise ValidationError(
            f"Bad datetime format: {value}",
            errors=[{"loc": ["query", field], "msg": "expected ISO date", "type": "datetime"}],
        )


# --- ENDPOINT ---
@router.get("", response_model=LogPage)
def get_logs(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    action: Optional[str] = Query(None, description="Filter by action"),
    user_id: Optional[str] = Query(None, description="Filter by actor id"),
    resource: Optional[str] = Query(None, description="Filter by resource"),
    status: Optional[str] = Query(None, description="SUCCESS / FAIL"),
    date_from: Optional[str] = Query(None, description="From (YYYY-MM-DD)"),
    date_to: Optional[str] = Query(None, description="To (YYYY-MM-DD)"),
    db: Session = Depends(get_db),
    admin: Actor = Depends(require_admin),
):
    query = db.query(Log)

    if action:
        query = query.filter(Log.action.ilike(f"%{action}%"))
    if user_id:
        query = query.filter(Log.user_id == user_id)
    if resource:
        query = query.filter(Log.resource.ilike(f"%{resource}%"))
    if status:
        query = query.filter(Log.status == status)
    if date_from:
        query = query.filter(Log.ts >= _parse_day(date_from, "date_from"))
    if date_to:
        query = query.filter(Log.ts <= _parse_day(date_to, "date_to", end_of_day=True))

    # Newest first
    query = query.order_by(Log.ts.desc(), Log.id.desc())

    total = query.count()
    logs = query.offset((page - 1) * page_size).limit(page_size).all()

    return {
        "items": logs,
        "total": total,
        "page": page,
        "page_size": page_size,
    }
