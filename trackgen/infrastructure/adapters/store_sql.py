from __future__ import annotations

import datetime as _dt
import logging
import os
from typing import Optional
from uuid import UUID

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    Table,
    Uuid,
    create_engine,
    event,
    func,
    insert,
    select,
)
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.pool import StaticPool

from trackgen.application.interfaces import IUniquenessStore, InsertResult
from trackgen.core.config import settings
from trackgen.core.exceptions import StoreUnavailableError
from trackgen.core.pyd_schemas import ShipmentAttributes, TrackingNumberRecord

logger = logging.getLogger(__name__)

metadata = MetaData()

tracking_numbers = Table(
    "tracking_numbers",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("tracking_number", String(16), nullable=False),
    Column("origin_country_id", String(2), nullable=False),
    Column("destination_country_id", String(2), nullable=False),
    Column("weight", Numeric(10, 3), nullable=False),
    Column("customer_id", Uuid, nullable=False),
    Column("customer_name", String(255), nullable=False),
    Column("customer_slug", String(255), nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False),
    Index("idx_tracking_number", "tracking_number", unique=True),
    Index("idx_customer_id", "customer_id"),
    Index("idx_created_at", "created_at"),
)


def build_engine(
    database_url: Optional[str] = None,
    *,
    timeout: Optional[float] = None,
    echo: Optional[bool] = None,
) -> Engine:
    """Create an engine for the configured database.

    SQLite gets a busy timeout and cross-thread connections; in-memory SQLite
    shares one connection so every thread sees the same database. File-backed
    SQLite runs in WAL mode, and transactions opened with the ``immediate``
    execution option take the write lock up front with ``BEGIN IMMEDIATE``.
    """
    url = make_url(database_url or settings.database_url)
    timeout = settings.database_timeout if timeout is None else timeout
    echo = settings.database_echo if echo is None else echo

    if url.get_backend_name() != "sqlite":
        return create_engine(url, echo=echo, pool_timeout=timeout, pool_pre_ping=True)

    kwargs = {
        "echo": echo,
        "connect_args": {"timeout": timeout, "check_same_thread": False},
    }
    if url.database in (None, "", ":memory:"):
        kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)

    parent = os.path.dirname(url.database)
    if parent:
        os.makedirs(parent, exist_ok=True)
    engine = create_engine(url, **kwargs)
    _enable_sqlite_wal(engine)
    return engine


def _enable_sqlite_wal(engine: Engine) -> None:
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # Let SQLAlchemy emit BEGIN instead of pysqlite
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        try:
            cursor.execute("PRAGMA journal_mode=WAL")
            cursor.execute("PRAGMA synchronous=NORMAL")
        finally:
            cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        if conn.get_execution_options().get("immediate"):
            conn.exec_driver_sql("BEGIN IMMEDIATE")
        else:
            conn.exec_driver_sql("BEGIN")


# MySQL / MariaDB ER_DUP_ENTRY
_MYSQL_DUP_ENTRY = 1062
# SQLSTATE unique_violation
_UNIQUE_VIOLATION = "23505"


def _is_unique_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    # psycopg2 exposes pgcode, psycopg 3 sqlstate
    if _UNIQUE_VIOLATION in (getattr(orig, "pgcode", None), getattr(orig, "sqlstate", None)):
        return True
    args = getattr(orig, "args", None) or ()
    if args and args[0] == _MYSQL_DUP_ENTRY:
        return True
    message = str(orig or exc).lower()
    return "unique" in message or "duplicate" in message


class SqlUniquenessStore(IUniquenessStore):
    """IUniquenessStore backed by a SQL table with a unique index."""

    def __init__(self, engine: Optional[Engine] = None) -> None:
        self.engine = engine or build_engine()
        try:
            metadata.create_all(self.engine)
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Could not initialise tracking number table: {e}", operation="init"
            ) from e

    def exists(self, tracking_number: str) -> bool:
        stmt = (
            select(tracking_numbers.c.id)
            .where(tracking_numbers.c.tracking_number == tracking_number)
            .limit(1)
        )
        try:
            with self.engine.connect() as conn:
                return conn.execute(stmt).first() is not None
        except SQLAlchemyError as e:
            raise StoreUnavailableError(
                f"Existence check failed: {e}", operation="exists"
            ) from e

    def insert(
        self,
        tracking_number: str,
        attributes: ShipmentAttributes,
        created_at: _dt.datetime,
    ) -> InsertResult:
        stmt = insert(tracking_numbers).values(
            tracking_number=tracking_number,
            origin_country_id=attributes.origin_country_id,
            destination_country_id=attributes.destination_country_id,
            weight=attributes.weight,
            customer_id=attributes.customer_id,
            customer_name=attributes.customer_name,
            customer_slug=attributes.customer_slug,
            created_at=created_at,
        )
        try:
            with self.engine.connect() as conn:
                conn.execution_options(immediate=True)
                with conn.begin():
                    conn.execute(stmt)
        except IntegrityError as e:
            if _is_unique_violation(e):
                logger.debug("Unique constraint rejected %s", tracking_number)
                return InsertResult.CONFLICT
            raise StoreUnavailableError(
                f"Insert rejected by the database: {e}", operation="insert"
            ) from e
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Insert failed: {e}", operation="insert") from e
        return InsertResult.OK

    def find(self, tracking_number: str) -> Optional[TrackingNumberRecord]:
        stmt = select(tracking_numbers).where(
            tracking_numbers.c.tracking_number == tracking_number
        )
        try:
            with self.engine.connect() as conn:
                row = conn.execute(stmt).mappings().first()
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Lookup failed: {e}", operation="find") from e
        if row is None:
            return None
        return TrackingNumberRecord(
            tracking_number=row["tracking_number"],
            attributes=ShipmentAttributes(
                origin_country_id=row["origin_country_id"],
                destination_country_id=row["destination_country_id"],
                weight=row["weight"],
                customer_id=row["customer_id"],
                customer_name=row["customer_name"],
                customer_slug=row["customer_slug"],
            ),
            created_at=row["created_at"],
        )

    def count_by_customer_id(self, customer_id: UUID) -> int:
        stmt = (
            select(func.count())
            .select_from(tracking_numbers)
            .where(tracking_numbers.c.customer_id == customer_id)
        )
        try:
            with self.engine.connect() as conn:
                return int(conn.execute(stmt).scalar_one())
        except SQLAlchemyError as e:
            raise StoreUnavailableError(f"Count failed: {e}", operation="count") from e
