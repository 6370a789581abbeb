"""
Error Handling Module for the Introspection Engine
Defines custom exceptions raised when a schema cannot be interpreted
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional
from datetime import datetime


class ErrorSeverity(str, Enum):
    """Error severity levels"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """Error categories for classification"""
    UNSUPPORTED_SHAPE = "unsupported_shape"
    INVARIANT = "invariant"
    INDEX_ATTRIBUTION = "index_attribution"
    INPUT = "input"
    CONFIGURATION = "configuration"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Additional context for errors"""
    run_id: Optional[str] = None
    table_name: Optional[str] = None
    columns: List[str] = field(default_factory=list)
    timestamp: datetime = field(default_factory=datetime.utcnow)
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "run_id": self.run_id,
            "table_name": self.table_name,
            "columns": self.columns,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


class IntrospectionError(Exception):
    """Base exception for the Introspection Engine"""

    def __init__(
        self,
        message: str,
        category: ErrorCategory = ErrorCategory.INTERNAL,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        context: Optional[ErrorContext] = None,
        recoverable: bool = False,
        suggestions: Optional[List[str]] = None,
        original_error: Optional[Exception] = None
    ):
        super().__init__(message)
        self.message = message
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.recoverable = recoverable
        self.suggestions = suggestions or []
        self.original_error = original_error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "recoverable": self.recoverable,
            "suggestions": self.suggestions,
            "context": self.context.to_dict(),
            "original_error": str(self.original_error) if self.original_error else None,
        }

    def __str__(self) -> str:
        return f"[{self.category.value}] {self.message}"


class InvariantViolationError(IntrospectionError):
    """The schema snapshot broke an assumption the engine relies on"""

    def __init__(
        self,
        message: str,
        table_name: Optional[str] = None,
        columns: Optional[List[str]] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        context = context or ErrorContext()
        context.table_name = context.table_name or table_name
        context.columns = context.columns or list(columns or [])

        suggestions = ["Verify the schema snapshot produced by the describer is complete"]
        if table_name:
            suggestions.append(f"Check the foreign keys declared on table '{table_name}'")

        super().__init__(
            message=message,
            category=ErrorCategory.INVARIANT,
            severity=ErrorSeverity.CRITICAL,
            context=context,
            recoverable=False,
            suggestions=suggestions,
            original_error=original_error
        )
        self.table_name = table_name
        self.columns = list(columns or [])


class AmbiguousIndexError(IntrospectionError):
    """A compound index could not be attributed to any field"""

    def __init__(
        self,
        message: str,
        table_name: Optional[str] = None,
        index_name: Optional[str] = None,
        columns: Optional[List[str]] = None,
        context: Optional[ErrorContext] = None
    ):
        context = context or ErrorContext()
        context.table_name = context.table_name or table_name
        context.columns = context.columns or list(columns or [])
        if index_name:
            context.metadata["index_name"] = index_name

        super().__init__(
            message=message,
            category=ErrorCategory.INDEX_ATTRIBUTION,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=False,
            suggestions=[
                "Compound indexes over foreign key columns must match a relation field",
                "Check that the index columns equal the foreign key columns",
            ],
        )
        self.table_name = table_name
        self.index_name = index_name
        self.columns = list(columns or [])


class SchemaLoadError(IntrospectionError):
    """A schema snapshot document could not be read"""

    def __init__(
        self,
        message: str,
        source: Optional[str] = None,
        table_name: Optional[str] = None,
        original_error: Optional[Exception] = None
    ):
        suggestions = ["Validate the snapshot against the documented format"]
        if source:
            suggestions.append(f"Check the snapshot source: {source}")

        super().__init__(
            message=message,
            category=ErrorCategory.INPUT,
            severity=ErrorSeverity.HIGH,
            context=ErrorContext(table_name=table_name),
            recoverable=False,
            suggestions=suggestions,
            original_error=original_error
        )
        self.source = source


class ConfigurationError(IntrospectionError):
    """Configuration errors"""

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        context: Optional[ErrorContext] = None,
        original_error: Optional[Exception] = None
    ):
        suggestions = ["Review configuration settings"]
        if config_key:
            suggestions.append(f"Check configuration for key: {config_key}")

        super().__init__(
            message=message,
            category=ErrorCategory.CONFIGURATION,
            severity=ErrorSeverity.HIGH,
            context=context,
            recoverable=False,
            suggestions=suggestions,
            original_error=original_error
        )
        self.config_key = config_key


def format_error(error: IntrospectionError) -> str:
    """Render an error as a diagnostic block naming the offending table/columns"""
    lines = [
        f"Error Type: {error.__class__.__name__}",
        f"Category: {error.category.value}",
        f"Message: {error.message}",
    ]

    if error.context.table_name:
        lines.append(f"Table: {error.context.table_name}")
    if error.context.columns:
        lines.append(f"Columns: {', '.join(error.context.columns)}")

    if error.suggestions:
        lines.append("Suggestions:")
        for suggestion in error.suggestions:
            lines.append(f"  - {suggestion}")

    if error.original_error:
        lines.append(f"Original Error: {str(error.original_error)}")

    return "\n".join(lines)
