"""
Database models and storage access for the locations table.

Uses SQLAlchemy 2.0. Nothing is connected at import time: callers build an
engine from explicit settings with ``create_db_engine`` and hand the session
factory to ``LocationStore``.
"""

from contextlib import contextmanager
from datetime import datetime
from typing import Any, Iterable, Iterator, Optional

from loguru import logger
from sqlalchemy import (
    JSON,
    DateTime,
    Engine,
    Float,
    String,
    Text,
    create_engine,
    delete,
    select,
    update,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool
from sqlalchemy.sql import func

from location_pipeline.config import DatabaseSettings
from location_pipeline.models import LocationRecord
from location_pipeline.results import Err, ErrorKind, Ok, Result


# =============================================================================
# Database Engine and Session
# =============================================================================

def create_db_engine(database: DatabaseSettings, echo: bool = False) -> Engine:
    """
    Build an engine from database settings.

    Raises:
        ConfigurationError: if credentials are missing
    """
    url = database.url
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every session sees an empty database
        return create_engine(
            url,
            echo=echo,
            poolclass=StaticPool,
            connect_args={"check_same_thread": False},
        )
    if url.startswith("sqlite"):
        return create_engine(url, echo=echo)

    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_timeout=30,
        pool_recycle=1800,
        connect_args={
            "connect_timeout": 10,
            "options": "-c statement_timeout=30000",  # 30s query timeout
        },
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Context manager for database sessions."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


# =============================================================================
# Models
# =============================================================================

class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Location(Base):
    """
    A point of interest shown on the travel site.

    Rows are created by scrapers and enrichment jobs; the data-quality jobs
    only delete rows (duplicate cleanup) or rewrite ``city`` (rollback).
    """
    __tablename__ = "locations"

    id: Mapped[str] = mapped_column(String(255), primary_key=True)

    name: Mapped[str] = mapped_column(String(500), nullable=False, index=True)
    city: Mapped[Optional[str]] = mapped_column(String(255), nullable=True, index=True)
    prefecture: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    region: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    category: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    # {"lat": ..., "lng": ...}
    coordinates: Mapped[Optional[dict]] = mapped_column(
        JSON().with_variant(JSONB, "postgresql"), nullable=True
    )

    # Google Places identifier
    place_id: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    short_description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    rating: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    image: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Pre-migration city value kept by the ward consolidation job
    city_original: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now())

    def __repr__(self) -> str:
        return f"<Location {self.id} - {self.name} ({self.city})>"


RECORD_FIELDS = (
    "id",
    "name",
    "city",
    "prefecture",
    "region",
    "category",
    "coordinates",
    "place_id",
    "description",
    "short_description",
    "rating",
    "image",
    "city_original",
)

MUTABLE_FIELDS = frozenset(RECORD_FIELDS) - {"id"}


def create_all_tables(engine: Engine) -> None:
    """Create all tables in the database."""
    Base.metadata.create_all(bind=engine)


def drop_all_tables(engine: Engine) -> None:
    """Drop all tables in the database. USE WITH CAUTION!"""
    Base.metadata.drop_all(bind=engine)


# =============================================================================
# Storage access
# =============================================================================

class LocationStore:
    """
    Read/update/delete access to the locations table.

    Every method returns ``Ok`` or ``Err`` instead of raising on database
    failures, so batch jobs can decide per error kind whether to abort.

    Usage:
        store = LocationStore(make_session_factory(engine))
        result = store.fetch_all()
        if not result.ok:
            ...
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def fetch_all(
        self,
        fields: Iterable[str] | None = None,
        page_size: int = 1000,
    ) -> Result:
        """
        Read every location, one page at a time, ordered by name.

        Stops when a page comes back shorter than ``page_size``. Any failing
        page turns the whole read into an ``Err(READ)``; a partial snapshot
        is never returned.

        Args:
            fields: Columns to select (``id`` and ``name`` are always included)
            page_size: Rows per page

        Returns:
            Ok(list[LocationRecord]) or Err(ErrorKind.READ, message)
        """
        wanted = list(RECORD_FIELDS) if fields is None else list(fields)
        unknown = [f for f in wanted if f not in RECORD_FIELDS]
        if unknown:
            return Err(ErrorKind.READ, f"Unknown location fields: {', '.join(unknown)}")
        for required in ("name", "id"):
            if required not in wanted:
                wanted.insert(0, required)

        columns = [getattr(Location, f) for f in wanted]
        records: list[LocationRecord] = []
        offset = 0

        try:
            with session_scope(self.session_factory) as session:
                while True:
                    stmt = (
                        select(*columns)
                        .order_by(Location.name, Location.id)
                        .offset(offset)
                        .limit(page_size)
                    )
                    rows = session.execute(stmt).mappings().all()
                    records.extend(LocationRecord.from_row(dict(row)) for row in rows)
                    logger.debug(f"Fetched {len(records)} locations...")

                    if len(rows) < page_size:
                        break
                    offset += page_size
        except SQLAlchemyError as e:
            logger.error(f"Error fetching locations at offset {offset}: {e}")
            return Err(ErrorKind.READ, f"Failed to fetch locations: {e}")

        return Ok(records)

    def update(self, location_id: str, fields: dict[str, Any]) -> Result:
        """Update columns of one location."""
        unknown = set(fields) - MUTABLE_FIELDS
        if unknown:
            return Err(ErrorKind.MUTATION, f"Cannot update fields: {', '.join(sorted(unknown))}")

        try:
            with session_scope(self.session_factory) as session:
                result = session.execute(
                    update(Location).where(Location.id == location_id).values(**fields)
                )
                if result.rowcount == 0:
                    return Err(ErrorKind.MUTATION, f"Location {location_id} not found")
        except SQLAlchemyError as e:
            return Err(ErrorKind.MUTATION, str(e))

        return Ok(None)

    def delete(self, location_id: str) -> Result:
        """Hard-delete one location. A missing id is a no-op failure."""
        try:
            with session_scope(self.session_factory) as session:
                result = session.execute(delete(Location).where(Location.id == location_id))
                if result.rowcount == 0:
                    return Err(ErrorKind.MUTATION, f"Location {location_id} not found")
        except SQLAlchemyError as e:
            return Err(ErrorKind.MUTATION, str(e))

        return Ok(None)

    def add_all(self, records: Iterable[LocationRecord]) -> int:
        """Insert records (seeding and fixtures). Raises on failure."""
        count = 0
        with session_scope(self.session_factory) as session:
            for record in records:
                row = record.to_dict()
                session.add(Location(**{k: row[k] for k in RECORD_FIELDS}))
                count += 1
        return count
