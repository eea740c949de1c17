# backend/utils/audit.py
from sqlalchemy.orm import Session
from models.log import Log


def _client_ip(request):
    if request is None or request.client is None:
        return None
    return request.client.host


# Append one audit entry; user_id is None for anonymous attempts
def write_log(db: Session, *, user_id, action, resource, status="SUCCESS", request=None, meta=None):
    entry = Log(
        user_id=user_id,
        action=action,
        resource=resource,
        status=status,
        ip=_client_ip(request),
        meta=meta or {},
    )
    db.add(entry)
    db.commit()
    return entry
