"""
SQLAlchemy database models for the event scheduler.

Provides persistent storage for:
- Cities and city-to-city travel times
- Events and their staffing (observers, SNG units, generators)
- Activity log
"""

from datetime import datetime

from sqlalchemy import (
    Column,
    String,
    Integer,
    Float,
    Numeric,
    Date,
    Time,
    Text,
    DateTime,
    Boolean,
    JSON,
    ForeignKey,
    Index,
    Table,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import DeclarativeBase, relationship


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


class CityRecord(Base):
    """City that can host events."""
    __tablename__ = "cities"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    country = Column(String(255), nullable=False, default="Saudi Arabia")
    latitude = Column(Float, nullable=True)
    longitude = Column(Float, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, onupdate=datetime.utcnow)


class CityDistanceRecord(Base):
    """
    Travel time between two cities.

    One row per unordered pair, stored with from_city_id < to_city_id.
    """
    __tablename__ = "city_distances"

    id = Column(Integer, primary_key=True, autoincrement=True)
    from_city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False)
    to_city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False)
    travel_time_hours = Column(Numeric(8, 2, asdecimal=False), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, onupdate=datetime.utcnow)

    from_city = relationship("CityRecord", foreign_keys=[from_city_id])
    to_city = relationship("CityRecord", foreign_keys=[to_city_id])

    __table_args__ = (
        UniqueConstraint("from_city_id", "to_city_id", name="uq_city_distance_pair"),
        CheckConstraint("from_city_id < to_city_id", name="ck_city_distance_canonical"),
        CheckConstraint("travel_time_hours >= 0", name="ck_city_distance_non_negative"),
    )


# Event <-> resource pivots (many-to-many)
event_observers = Table(
    "event_observers",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("observer_id", Integer, ForeignKey("observers.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("event_id", "observer_id", name="uq_event_observer"),
)

event_sngs = Table(
    "event_sngs",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("sng_id", Integer, ForeignKey("sngs.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("event_id", "sng_id", name="uq_event_sng"),
)

event_generators = Table(
    "event_generators",
    Base.metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("event_id", Integer, ForeignKey("events.id", ondelete="CASCADE"), nullable=False, index=True),
    Column("generator_id", Integer, ForeignKey("generators.id", ondelete="CASCADE"), nullable=False, index=True),
    UniqueConstraint("event_id", "generator_id", name="uq_event_generator"),
)


class ObserverRecord(Base):
    """Observer (OB van) crew."""
    __tablename__ = "observers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    code = Column(String(50), unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    events = relationship("EventRecord", secondary=event_observers, back_populates="observers")

    @property
    def label(self) -> str:
        return self.code


class SngRecord(Base):
    """Satellite news gathering unit."""
    __tablename__ = "sngs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    events = relationship("EventRecord", secondary=event_sngs, back_populates="sngs")

    @property
    def label(self) -> str:
        return self.name


class GeneratorRecord(Base):
    """Mobile power generator."""
    __tablename__ = "generators"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    events = relationship("EventRecord", secondary=event_generators, back_populates="generators")

    @property
    def label(self) -> str:
        return self.name


class EventRecord(Base):
    """Scheduled sports event."""
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), nullable=False)
    event_date = Column(Date, nullable=False, index=True)
    event_time = Column(Time, nullable=False)
    city_id = Column(Integer, ForeignKey("cities.id", ondelete="CASCADE"), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="scheduled")
    description = Column(Text, nullable=True)
    created_by = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, onupdate=datetime.utcnow)

    city = relationship("CityRecord", lazy="joined")
    observers = relationship("ObserverRecord", secondary=event_observers, back_populates="events", lazy="selectin")
    sngs = relationship("SngRecord", secondary=event_sngs, back_populates="events", lazy="selectin")
    generators = relationship("GeneratorRecord", secondary=event_generators, back_populates="events", lazy="selectin")

    __table_args__ = (
        Index("ix_events_date_time", "event_date", "event_time"),
    )


class ActivityLogRecord(Base):
    """Audit trail entry."""
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, nullable=True, index=True)
    action = Column(String(50), nullable=False, index=True)
    model_type = Column(String(100), nullable=True)
    model_id = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    details = Column(JSON, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, index=True)

    __table_args__ = (
        Index("ix_activity_model", "model_type", "model_id"),
    )
