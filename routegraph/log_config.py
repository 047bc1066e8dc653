"""structlog setup for applications that embed routegraph.

Library modules never configure logging themselves; they emit events such as
``vertex_added`` or ``dijkstra_shortest_path_complete`` through module level
``structlog.get_logger(__name__)`` loggers. Call :func:`configure_logging`
(or :func:`configure_from_config` with a loaded ``RouteGraphConfig``) once at
start-up to decide how those events are rendered.
"""

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog

if TYPE_CHECKING:
    from routegraph.config import RouteGraphConfig


def configure_logging(level: str = "INFO", json_logs: bool = True) -> None:
    """Route structlog events through stdlib logging on stdout.

    Every event gets the bound contextvars (correlation id, map name, ...),
    its level, an ISO timestamp and the module, function and line it came
    from. Loggers are cached on first use, so configure before the first
    search is logged.

    Args:
        level: Level name, case-insensitive
        json_logs: One JSON object per line when True, coloured console
            output when False

    Raises:
        ValueError: If an invalid log level is provided
    """
    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        msg = f"Invalid log level: {level}"
        raise ValueError(msg)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=numeric_level,
    )
    logging.getLogger().setLevel(numeric_level)

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.CallsiteParameterAdder(
            parameters=[
                structlog.processors.CallsiteParameter.MODULE,
                structlog.processors.CallsiteParameter.FUNC_NAME,
                structlog.processors.CallsiteParameter.LINENO,
            ],
        ),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if json_logs:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True,
                exception_formatter=structlog.dev.plain_traceback,
            ),
        )

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def configure_from_config(config: "RouteGraphConfig") -> None:
    """Configure logging from a loaded RouteGraphConfig."""
    configure_logging(level=config.logging_level, json_logs=config.json_logs)


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Return a structlog logger named after the calling module."""
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str) -> None:
    """Tag every following event with ``correlation_id``.

    Lets the search, path reconstruction and blocking events of one routing
    request be grouped together.
    """
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def unbind_correlation_id() -> None:
    """Remove the correlation ID from the logging context."""
    structlog.contextvars.unbind_contextvars("correlation_id")


def bind_context(**kwargs: Any) -> None:
    """Bind arbitrary context variables to the logging context.

    Args:
        **kwargs: Key-value pairs to add to the logging context

    Example:
        >>> bind_context(map_name="porto", request_id="r-17")
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    """Drop the named keys from the bound context."""
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    """Clear all context variables from the logging context."""
    structlog.contextvars.clear_contextvars()
