from sqlalchemy import Column, String, DateTime
from datetime import datetime
from .db import Base
import uuid

DEFAULT_ROLE = "member"


class User(Base):
    __tablename__ = "users"
    id = Column(String(32), primary_key=True, default=lambda: uuid.uuid4().hex)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password = Column(String, nullable=False)
    role = Column(String, default=DEFAULT_ROLE, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    # Only written by a successful login
    last_login = Column(DateTime, nullable=True)
