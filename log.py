# log.py
import logging
import sys
from typing import Optional

import structlog

from config import LOG_FORMAT, LOG_LEVEL

_configured = False


def setup_logging(level: str = LOG_LEVEL, fmt: str = LOG_FORMAT) -> None:
  """Configure structlog on top of the stdlib root logger. Safe to call twice."""
  global _configured
  if _configured:
    return

  logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)

  processors = [
    structlog.stdlib.filter_by_level,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.stdlib.PositionalArgumentsFormatter(),
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
    structlog.processors.format_exc_info,
    structlog.processors.UnicodeDecoder(),
  ]
  if fmt == "json":
    processors.append(structlog.processors.JSONRenderer())
  else:
    processors.append(structlog.dev.ConsoleRenderer())

  structlog.configure(
    processors=processors,
    wrapper_class=structlog.stdlib.BoundLogger,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
  )
  _configured = True


def get_logger(name: Optional[str] = None) -> structlog.stdlib.BoundLogger:
  setup_logging()
  return structlog.get_logger(name)
