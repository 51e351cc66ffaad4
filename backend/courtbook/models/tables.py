# backend/courtbook/models/tables.py

from datetime import timezone

from sqlalchemy import Column, Date, DateTime, Integer, Numeric, Text, UniqueConstraint, text
from sqlalchemy.orm import declarative_base
from sqlalchemy.types import TypeDecorator

Base = declarative_base()
metadata = Base.metadata


class UTCDateTime(TypeDecorator):
    """Stored as UTC; read back timezone-aware even where the backend (SQLite) drops the offset."""

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


class Reservations(Base):
    __tablename__ = 'reservations'
    __table_args__ = (
        # One reservation per court block
        UniqueConstraint('date', 'slot', name='uq_reservations_date_slot'),
    )

    id = Column(Integer, primary_key=True)
    date = Column(Date, nullable=False, index=True)
    slot = Column(Text, nullable=False)
    owner_id = Column(Text, nullable=False, index=True)
    owner_email = Column(Text)
    price = Column(Numeric(10, 2), nullable=False)
    payment_method = Column(Text, nullable=False)
    payment_status = Column(Text, nullable=False)
    created_at = Column(UTCDateTime(), nullable=False, server_default=text('CURRENT_TIMESTAMP'))


class UserRoles(Base):
    __tablename__ = 'user_roles'

    identity_id = Column(Text, primary_key=True)
    email = Column(Text)
    role = Column(Text, nullable=False, server_default=text("'customer'"))
    assigned_at = Column(UTCDateTime(), nullable=False, server_default=text('CURRENT_TIMESTAMP'))
