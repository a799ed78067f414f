from sqlalchemy import Column, Date, Integer, Text, Time, UniqueConstraint, text

from sqlalchemy.orm import declarative_base

Base = declarative_base()
metadata = Base.metadata


class Reservations(Base):
    __tablename__ = 'reservations'

    id = Column(Text, primary_key=True)
    guest_name = Column(Text, nullable=False)
    guest_phone = Column(Text, nullable=False)
    party_size = Column(Integer, nullable=False)
    reservation_date = Column(Date, nullable=False, index=True)
    reservation_time = Column(Time, nullable=False)
    status = Column(Text, nullable=False, server_default=text("'pending'"))
    booking_code = Column(Text, unique=True)
    guest_email = Column(Text)
    table_number = Column(Integer)
    special_requests = Column(Text)
    admin_notes = Column(Text)
    created_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class Tables(Base):
    __tablename__ = 'tables'

    id = Column(Integer, primary_key=True)
    table_number = Column(Integer, nullable=False, unique=True)
    capacity = Column(Integer, nullable=False, server_default=text('4'))
    is_active = Column(Integer, nullable=False, server_default=text('1'))
    zone = Column(Text)


class Settings(Base):
    __tablename__ = 'settings'

    key = Column(Text, primary_key=True)
    value = Column(Text, nullable=False)
    description = Column(Text)
    updated_at = Column(Text, server_default=text('CURRENT_TIMESTAMP'))


class Holidays(Base):
    __tablename__ = 'holidays'
    __table_args__ = (
        UniqueConstraint('holiday_date'),
    )

    id = Column(Integer, primary_key=True)
    holiday_date = Column(Date, nullable=False)
    description = Column(Text)
