from __future__ import annotations

import logging

import structlog

from boardhub.config import settings


def configure_logging(level: str | None = None, *, json: bool | None = None) -> None:
  lvl = logging.getLevelName((level or settings.log_level or "INFO").upper())
  if not isinstance(lvl, int):
    lvl = logging.INFO
  as_json = settings.log_json if json is None else json

  processors: list = [
    structlog.contextvars.merge_contextvars,
    structlog.processors.add_log_level,
    structlog.processors.TimeStamper(fmt="iso", utc=True),
  ]
  if as_json:
    processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
  else:
    processors.append(structlog.dev.ConsoleRenderer())

  structlog.configure(
    processors=processors,
    wrapper_class=structlog.make_filtering_bound_logger(lvl),
    cache_logger_on_first_use=True,
  )
