"""Logs structurés (structlog) du service et de l'outil opérateur.

Les événements portent un nom stable (`purge_batch_deleted`, `cleanup_step_failed`,
`deletion_completed`...) et les champs liés via contextvars (`request_id`). Les logs `logging`
standards sont envoyés sur la même sortie (stderr), stdout restant réservé au dialogue du CLI.
"""

import logging
import sys

import structlog


def setup_logging(debug: bool = False):
    """Configure structlog; `debug` active les transitions d'état de suppression."""
    level = logging.DEBUG if debug else logging.INFO
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.format_exc_info,
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(level),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(level=level, stream=sys.stderr, format="%(levelname)s %(name)s %(message)s")
