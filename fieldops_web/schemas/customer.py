"""SQLAlchemy ORM models for customers and service locations."""

from datetime import datetime
from sqlalchemy import Column, String, DateTime, ForeignKey

from .job import Base, new_id


class Customer(Base):
    """Customer database model."""

    __tablename__ = "customers"

    id = Column(String(36), primary_key=True, default=new_id)
    first_name = Column(String(120), nullable=True)
    last_name = Column(String(120), nullable=True)
    full_name = Column(String(255), nullable=True)
    phone = Column(String(40), nullable=True, index=True)
    email = Column(String(255), nullable=True)

    billing_address_line1 = Column(String(255), nullable=True)
    billing_address_line2 = Column(String(255), nullable=True)
    billing_city = Column(String(120), nullable=True)
    billing_state = Column(String(40), nullable=True)
    billing_zip = Column(String(20), nullable=True)

    owner_user_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Customer(id={self.id}, full_name={self.full_name})>"


class Location(Base):
    """Service address owned by a customer."""

    __tablename__ = "locations"

    id = Column(String(36), primary_key=True, default=new_id)
    customer_id = Column(String(36), ForeignKey("customers.id"), nullable=False)
    label = Column(String(120), nullable=True)
    address_line1 = Column(String(255), nullable=False)
    address_line2 = Column(String(255), nullable=True)
    city = Column(String(120), nullable=False)
    state = Column(String(40), nullable=True)
    zip = Column(String(20), nullable=True)
    owner_user_id = Column(String(36), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
