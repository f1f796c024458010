"""Custom exceptions for shopgen.

This module defines the exception hierarchy:
- ShopgenError (base)
- TabularParseError
- TransformError
- LoadError
- MissingArtifactError
"""

from __future__ import annotations

from pathlib import Path


class ShopgenError(Exception):
    """Base exception for all shopgen operations.

    Attributes:
        message: Human-readable error description.
        details: Optional additional context about the error.

    Example:
        >>> try:
        ...     await loader.load_all()
        ... except ShopgenError as e:
        ...     print(f"Pipeline error: {e}")
    """

    def __init__(self, message: str, *, details: dict[str, str] | None = None) -> None:
        """Initialize ShopgenError.

        Args:
            message: Human-readable error description.
            details: Optional additional context about the error.
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return string representation with details if present."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class TabularParseError(ShopgenError):
    """Tabular text could not be split into header-aligned records.

    Raised when:
    - A data record has a different field count than the header
    - A quoted field is still open at end of input

    Example:
        >>> try:
        ...     read_rows(Path("data/orders.csv"))
        ... except TabularParseError as e:
        ...     print(f"{e.source}:{e.line_number}")
    """

    def __init__(
        self,
        message: str,
        *,
        source: str | Path,
        line_number: int,
    ) -> None:
        """Initialize TabularParseError.

        Args:
            message: Human-readable error description.
            source: File path (or label) of the text being parsed.
            line_number: 1-based physical line where the bad record starts.
        """
        super().__init__(
            f"{message} in {source} at line {line_number}",
            details={"source": str(source), "line": str(line_number)},
        )
        self.source = str(source)
        self.line_number = line_number


class TransformError(ShopgenError):
    """A parsed text field could not be coerced to its column type."""

    def __init__(
        self,
        message: str,
        *,
        table: str,
        source: str | Path,
        row: int | None = None,
        column: str | None = None,
    ) -> None:
        """Initialize TransformError.

        Args:
            message: Human-readable error description.
            table: Target table name.
            source: Source file the row came from.
            row: 1-based data row index (header excluded).
            column: Column whose value failed to convert.
        """
        details = {"table": table, "source": str(source)}
        if row is not None:
            details["row"] = str(row)
        if column:
            details["column"] = column
        super().__init__(message, details=details)
        self.table = table
        self.source = str(source)
        self.row = row
        self.column = column


class LoadError(ShopgenError):
    """A store operation failed.

    Raised when:
    - The database cannot be opened or the schema cannot be created
    - A bulk insert violates a constraint (the transaction is rolled back)

    Example:
        >>> try:
        ...     await loader.load_table(spec)
        ... except LoadError as e:
        ...     print(f"{e.table}: {e.operation} failed")
    """

    def __init__(
        self,
        message: str = "Load operation failed",
        *,
        table: str | None = None,
        operation: str | None = None,
        cause: str | None = None,
    ) -> None:
        """Initialize LoadError.

        Args:
            message: Human-readable error description.
            table: The table being written when the failure occurred.
            operation: The store operation (create_schema, insert, connect).
            cause: The underlying cause of the failure.
        """
        details: dict[str, str] = {}
        if table:
            details["table"] = table
        if operation:
            details["operation"] = operation
        if cause:
            details["cause"] = cause
        super().__init__(message, details=details)
        self.table = table
        self.operation = operation
        self.cause = cause


class MissingArtifactError(ShopgenError):
    """An input file or database the step depends on does not exist."""

    def __init__(self, path: str | Path, *, command: str, what: str = "File") -> None:
        """Initialize MissingArtifactError.

        Args:
            path: Expected location of the artifact.
            command: CLI command that produces the artifact.
            what: Short description of the artifact.
        """
        super().__init__(f"{what} not found at {path}. Run '{command}' first.")
        self.path = str(path)
        self.command = command
