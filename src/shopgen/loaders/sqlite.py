"""SQLite loader for generated e-commerce text files.

This module provides the SqliteLoader for loading the five generated files
into a fresh SQLite database through SQLAlchemy's asyncio extension.

Features:
- Database file deleted and recreated on every run (never additive)
- Foreign keys enforced on every connection
- Tables loaded in dependency order
- One transaction per table: all rows commit together or none do
"""

from __future__ import annotations

from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from shopgen.config import ShopgenSettings
from shopgen.errors import LoadError, MissingArtifactError, TabularParseError
from shopgen.loaders.schema import enable_foreign_keys, get_table, metadata
from shopgen.loaders.transforms import LOAD_ORDER, TableSpec
from shopgen.tabular import read_rows

logger = structlog.get_logger(__name__)

GENERATE_COMMAND = "shopgen generate"


def sqlite_url(path: Path, *, read_only: bool = False) -> str:
    """Build an aiosqlite URL for a database file.

    Args:
        path: Database file
        read_only: Open with ``mode=ro`` so the file is never created or written
    """
    if read_only:
        return f"sqlite+aiosqlite:///file:{path.resolve()}?mode=ro&uri=true"
    return f"sqlite+aiosqlite:///{path}"


def create_engine(path: Path, *, read_only: bool = False) -> AsyncEngine:
    """Create an async engine with foreign key enforcement."""
    engine = create_async_engine(sqlite_url(path, read_only=read_only))
    enable_foreign_keys(engine.sync_engine)
    return engine


class LoadResult(BaseModel):
    """Result of loading one table.

    Attributes:
        table_name: Table that was loaded
        rows_loaded: Number of rows inserted
        source_path: Text file the rows came from
    """

    model_config = ConfigDict(frozen=True)

    table_name: str
    rows_loaded: int
    source_path: str


class SqliteLoader:
    """Load generated text files into a freshly created SQLite database.

    Example:
        >>> loader = SqliteLoader(ShopgenSettings(data_dir=Path("data")))
        >>> results = await loader.load_all()
        >>> print(f"Loaded {sum(r.rows_loaded for r in results)} rows")
    """

    def __init__(
        self,
        settings: ShopgenSettings | None = None,
        *,
        table_specs: tuple[TableSpec, ...] = LOAD_ORDER,
    ) -> None:
        """Initialize the loader.

        Args:
            settings: Paths for the data directory and database file
            table_specs: Tables to load, in dependency order
        """
        self._settings = settings or ShopgenSettings()
        self._table_specs = table_specs
        self._engine: AsyncEngine | None = None
        self._log = logger.bind(database=str(self._settings.database_path))

    @property
    def database_path(self) -> Path:
        return self._settings.database_path

    @property
    def engine(self) -> AsyncEngine:
        """The open engine; only valid inside load_all."""
        if self._engine is None:
            raise LoadError("Database is not open", operation="connect")
        return self._engine

    def source_path(self, spec: TableSpec) -> Path:
        return self._settings.source_path(spec.file_name)

    def check_sources(self) -> None:
        """Fail fast when any expected text file is absent.

        Raises:
            MissingArtifactError: Naming the first missing file
        """
        if not self._settings.data_dir.is_dir():
            raise MissingArtifactError(
                self._settings.data_dir, command=GENERATE_COMMAND, what="Data directory"
            )
        for spec in self._table_specs:
            path = self.source_path(spec)
            if not path.is_file():
                raise MissingArtifactError(
                    path, command=GENERATE_COMMAND, what=f"Source file for {spec.table_name}"
                )

    def remove_database(self) -> None:
        """Delete the database file if present."""
        path = self.database_path
        if path.exists():
            path.unlink()
            self._log.info("database_removed", path=str(path))

    async def load_all(self) -> list[LoadResult]:
        """Rebuild the database from the text files.

        Returns:
            One LoadResult per table, in load order

        Raises:
            MissingArtifactError: A source file is absent
            TabularParseError: A source file is malformed
            TransformError: A value cannot be converted
            LoadError: Schema creation or an insert failed
        """
        self.check_sources()
        self.remove_database()

        self._engine = create_engine(self.database_path)
        try:
            await self.create_schema()
            results = [await self.load_table(spec) for spec in self._table_specs]
        finally:
            await self._engine.dispose()
            self._engine = None

        self._log.info(
            "database_loaded",
            tables=len(results),
            rows=sum(r.rows_loaded for r in results),
        )
        return results

    async def create_schema(self) -> None:
        """Create all tables.

        Raises:
            LoadError: If DDL execution fails
        """
        try:
            async with self.engine.begin() as conn:
                await conn.run_sync(metadata.create_all)
        except SQLAlchemyError as e:
            raise LoadError(
                "Schema creation failed",
                operation="create_schema",
                cause=str(getattr(e, "orig", None) or e),
            ) from e
        self._log.debug("schema_created", tables=sorted(metadata.tables))

    async def load_table(self, spec: TableSpec) -> LoadResult:
        """Parse, transform and insert one table in a single transaction.

        Args:
            spec: Table to load

        Returns:
            LoadResult with the inserted row count

        Raises:
            TabularParseError: The source file is malformed
            TransformError: A value cannot be converted
            LoadError: The insert failed; nothing from this table is kept
        """
        path = self.source_path(spec)
        try:
            rows = read_rows(path)
        except TabularParseError as e:
            e.details["table"] = spec.table_name
            self._log.error("table_parse_failed", table=spec.table_name, error=str(e))
            raise
        values = spec.transform(rows, source=path)
        table = get_table(spec.table_name)

        if values:
            try:
                async with self.engine.begin() as conn:
                    await conn.execute(table.insert(), values)
            except SQLAlchemyError as e:
                self._log.error("table_load_failed", table=spec.table_name, error=str(e))
                raise LoadError(
                    f"Bulk insert into {spec.table_name} failed",
                    table=spec.table_name,
                    operation="insert",
                    cause=str(getattr(e, "orig", None) or e),
                ) from e

        self._log.info("table_loaded", table=spec.table_name, rows=len(values), source=str(path))
        return LoadResult(table_name=spec.table_name, rows_loaded=len(values), source_path=str(path))


async def count_rows(database_path: Path, table_name: str) -> int:
    """Count the rows of one loaded table.

    Args:
        database_path: SQLite file
        table_name: Declared table name

    Returns:
        Row count
    """
    engine = create_engine(database_path, read_only=True)
    try:
        async with engine.connect() as conn:
            result = await conn.execute(select(func.count()).select_from(get_table(table_name)))
            return int(result.scalar_one())
    finally:
        await engine.dispose()
