"""Error logging utilities for data generation."""

import traceback
from typing import Any, Optional, Dict
from seedgraph.generation.errors import ConfigurationError, ValueGenerationError
from seedgraph.config.logging import get_logger

logger = get_logger(__name__)


def log_error(
    error: Exception,
    context: Optional[Dict[str, Any]] = None,
    operation: Optional[str] = None,
    entity: Optional[str] = None,
    column_name: Optional[str] = None,
    log_level: str = "error",
) -> None:
    """
    Log an error with its type, message, context and traceback.

    Args:
        error: The exception that occurred
        context: Additional context dictionary (e.g., {'row_count': 1000})
        operation: Description of the operation being performed
        entity: Name of the entity where the error occurred
        column_name: Name of the column where the error occurred
        log_level: Logging level ('error', 'warning', 'critical')
    """
    error_type = type(error).__name__
    error_message = str(error)

    context_parts = []
    if operation:
        context_parts.append(f"Operation: {operation}")
    if entity:
        context_parts.append(f"Entity: {entity}")
    if column_name:
        context_parts.append(f"Column: {column_name}")
    if context:
        context_str = ", ".join(f"{k}={v}" for k, v in context.items())
        context_parts.append(f"Context: {context_str}")

    error_msg = f"[{error_type}] {error_message}"
    if context_parts:
        error_msg += " | " + " | ".join(context_parts)

    if log_level.lower() == "critical":
        logger.critical(error_msg, exc_info=True)
    elif log_level.lower() == "warning":
        logger.warning(error_msg, exc_info=True)
    else:
        logger.error(error_msg, exc_info=True)

    if isinstance(error, ConfigurationError):
        logger.debug(f"ConfigurationError details: schema or edge config is not generatable - {error_message}")
    elif isinstance(error, ValueGenerationError):
        logger.debug(f"ValueGenerationError details: value oracle failed - {error_message}")
    elif isinstance(error, KeyError):
        logger.debug(f"KeyError details: Missing key - {error_message}")
    elif isinstance(error, RecursionError):
        logger.critical(f"RecursionError details: dependency chain too deep - {error_message}")

    logger.debug(f"Full traceback for {error_type}:\n{traceback.format_exc()}")


def safe_execute(
    func,
    error_context: Optional[Dict[str, Any]] = None,
    operation: Optional[str] = None,
    entity: Optional[str] = None,
    column_name: Optional[str] = None,
) -> Any:
    """
    Execute a function, logging any exception with context before re-raising it.

    Args:
        func: Function to execute (callable)
        error_context: Additional context for error logging
        operation: Description of the operation
        entity: Name of the entity
        column_name: Name of the column

    Returns:
        Result of func()
    """
    try:
        return func()
    except Exception as e:
        log_error(
            error=e,
            context=error_context,
            operation=operation,
            entity=entity,
            column_name=column_name,
        )
        raise
