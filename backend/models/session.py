# backend/models/session.py
from sqlalchemy import Column, String, DateTime, JSON, Index
from database import Base


# Server-side login session opened after a verified identity assertion
class AuthSession(Base):
    __tablename__ = "sessions"

    sid = Column(String, primary_key=True)
    sess = Column(JSON, nullable=False)
    expire = Column(DateTime, nullable=False)

    __table_args__ = (Index("IDX_session_expire", "expire"),)
