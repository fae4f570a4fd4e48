"""SQLAlchemy ORM model for contractors."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, Text

from .job import Base, new_id


class Contractor(Base):
    """HVAC contractor whose installs are being tested, and who may be billed."""

    __tablename__ = "contractors"

    id = Column(String(36), primary_key=True, default=new_id)
    name = Column(String(255), nullable=False, index=True)
    phone = Column(String(40), nullable=True)
    email = Column(String(255), nullable=True)
    notes = Column(Text, nullable=True)

    billing_name = Column(String(255), nullable=True)
    billing_email = Column(String(255), nullable=True)
    billing_phone = Column(String(40), nullable=True)
    billing_address_line1 = Column(String(255), nullable=True)
    billing_address_line2 = Column(String(255), nullable=True)
    billing_city = Column(String(120), nullable=True)
    billing_state = Column(String(40), nullable=True)
    billing_zip = Column(String(20), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Contractor(id={self.id}, name={self.name})>"
