"""
Centralized logging configuration for the AssetFlow engine.

This module provides standardized logging configuration using structlog
for all components. Flow inference and regime decisions are logged through
dedicated helpers so every emitted edge and label leaves an audit trail.
"""
import logging
import sys
from typing import TYPE_CHECKING, Any, Optional

import structlog
from structlog.types import FilteringBoundLogger

if TYPE_CHECKING:
    from ..models.analysis import FlowEdge


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Configure structlog for the entire application.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        format_json: If True, output JSON format; otherwise human-readable
        include_timestamp: Include timestamp in log output
        include_caller: Include caller information (filename, line number)
        extra_processors: Additional structlog processors to include
    """
    log_level = getattr(logging, level.upper())

    # stdlib logging is the sink; structlog does the formatting
    logging.basicConfig(
        level=log_level,
        stream=sys.stderr,
        format="%(message)s"
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_flow_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger bound for flow inference and regime decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger for flow decisions
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="flow_inference",
        audit_trail=True
    )


def log_flow_edge(
    logger: FilteringBoundLogger,
    edge: "FlowEdge",
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log an emitted flow edge with standardized format.

    Args:
        logger: Structlog logger instance
        edge: The flow edge that was created
        context: Additional context data
    """
    bound_logger = logger.bind(
        from_class=edge.from_class,
        to_class=edge.to_class,
        strength=round(edge.strength, 4),
        magnitude=round(edge.magnitude, 6),
        reason=edge.reason,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.debug("Flow edge emitted")


def log_regime_decision(
    logger: FilteringBoundLogger,
    label: str,
    confidence: float,
    trigger: Optional[str],
    edge_count: int,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a regime classification with standardized format.

    Args:
        logger: Structlog logger instance
        label: Regime label chosen
        confidence: Confidence attached to the label
        trigger: Description of the edge that matched, None for the default
        edge_count: Number of edges inspected
        context: Additional context data
    """
    bound_logger = logger.bind(
        regime=label,
        confidence=confidence,
        trigger=trigger or "default",
        edges_inspected=edge_count,
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    bound_logger.info("Market regime classified")
