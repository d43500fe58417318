"""structlog setup for scripts and interactive use.

Library modules only call ``structlog.get_logger()``; configuring output is
left to the entry point.
"""

import logging

import structlog


def configure_logging(verbose: bool = False, timestamps: bool = False) -> None:
    """Install a console renderer filtered at INFO (DEBUG when verbose)."""
    processors: list[structlog.typing.Processor] = [structlog.processors.add_log_level]
    if timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors.append(structlog.dev.ConsoleRenderer())

    log_level = logging.DEBUG if verbose else logging.INFO
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
    )
