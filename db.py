# db.py
import threading
from typing import Any, Dict, List, Mapping, Optional, Protocol

from fastapi.concurrency import run_in_threadpool
from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlmodel import SQLModel, create_engine

import config
from log import get_logger

logger = get_logger(__name__)

Row = Dict[str, Any]


class Pool(Protocol):
  async def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Row]:
    ...


class EnginePool:
  """Runs one statement per call on a connection checked out of the engine's pool."""

  def __init__(self, engine: Engine):
    self.engine = engine

  def _execute(self, sql: str, params: Optional[Mapping[str, Any]]) -> List[Row]:
    with self.engine.connect() as conn:
      result = conn.execute(text(sql), dict(params or {}))
      return [dict(r) for r in result.mappings()]

  async def query(self, sql: str, params: Optional[Mapping[str, Any]] = None) -> List[Row]:
    return await run_in_threadpool(self._execute, sql, params)

  def close(self) -> None:
    self.engine.dispose()


def build_engine(url: Optional[str] = None, **kwargs: Any) -> Engine:
  url = (url or config.DATABASE_URL).strip()
  if not url:
    raise RuntimeError("DATABASE_URL is not set in backend .env")

  opts: Dict[str, Any] = {"echo": config.DB_ECHO, "pool_pre_ping": True}
  if url.startswith("sqlite"):
    # connections are used from worker threads
    opts["connect_args"] = {"check_same_thread": False}
  else:
    opts["pool_size"] = config.DB_POOL_SIZE
    opts["max_overflow"] = config.DB_MAX_OVERFLOW
  opts.update(kwargs)
  return create_engine(url, **opts)


def init_db(engine: Engine) -> None:
  # local/dev bootstrap only; the production schema is managed elsewhere
  import models  # noqa: F401  registers the table models
  SQLModel.metadata.create_all(engine)


_pool: Optional[EnginePool] = None
_pool_lock = threading.Lock()


def get_pool() -> EnginePool:
  """Process-wide pool, built on first use. Also the FastAPI dependency."""
  global _pool
  # FastAPI calls this from threadpool workers
  with _pool_lock:
    if _pool is None:
      _pool = EnginePool(build_engine())
      logger.info("database_pool_initialized", pool_size=config.DB_POOL_SIZE)
  return _pool


def close_pool() -> None:
  global _pool
  with _pool_lock:
    if _pool is not None:
      _pool.close()
      _pool = None
      logger.info("database_pool_closed")
