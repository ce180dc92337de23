# /app/db/models/notification_models.py

from sqlalchemy import Column, String, Boolean, DateTime, ForeignKey

from ..base_class import Base


class Notification(Base):
    """A message addressed to a single user. `is_read` only ever goes False -> True."""
    id = Column(String, primary_key=True, index=True)
    user_id = Column(String, ForeignKey("users.id"), nullable=False, index=True)
    title = Column(String, nullable=False)
    body = Column(String, nullable=False)
    link = Column(String, nullable=True)
    is_read = Column(Boolean, nullable=False, default=False, index=True)
    # One of: info, warning, success
    type = Column(String, nullable=False, default="info")
    tenant_id = Column(String, ForeignKey("tenants.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False)
