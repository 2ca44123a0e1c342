"""Shared fixtures: a scriptable fake pool and a seeded SQLite-backed engine pool."""

import datetime as dt

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

import config
from db import EnginePool, build_engine, get_pool, init_db
from main import app
from models import Customer, Invoice, Revenue


class FakePool:
  """Stands in for the connection pool.

  `rows` is either a list returned for every call, or a callable
  taking (sql, params) and returning rows. `error` is raised on every call.
  """

  def __init__(self, rows=None, error=None):
    self.rows = rows if rows is not None else []
    self.error = error
    self.calls = []

  async def query(self, sql, params=None):
    self.calls.append((sql, params))
    if self.error is not None:
      raise self.error
    if callable(self.rows):
      return self.rows(sql, params)
    return self.rows


CUSTOMERS = [
  dict(id="c1", name="Delba de Oliveira", email="delba@oliveira.com", image_url="/customers/delba.png"),
  dict(id="c2", name="Lee Robinson", email="lee@robinson.com", image_url="/customers/lee.png"),
  dict(id="c3", name="Hector Simpson", email="hector@simpson.com", image_url="/customers/hector.png"),
  dict(id="c4", name="Amy Burns", email="amy@burns.com", image_url="/customers/amy.png"),
]

INVOICES = [
  dict(id="i1", customer_id="c1", amount=15795, status="pending", date=dt.date(2022, 12, 6)),
  dict(id="i2", customer_id="c2", amount=20348, status="pending", date=dt.date(2022, 11, 14)),
  dict(id="i3", customer_id="c3", amount=3040, status="paid", date=dt.date(2022, 10, 29)),
  dict(id="i4", customer_id="c1", amount=44800, status="paid", date=dt.date(2023, 9, 10)),
  dict(id="i5", customer_id="c2", amount=34577, status="pending", date=dt.date(2023, 8, 5)),
  dict(id="i6", customer_id="c3", amount=54246, status="pending", date=dt.date(2023, 7, 16)),
  dict(id="i7", customer_id="c1", amount=666, status="pending", date=dt.date(2023, 6, 27)),
  dict(id="i8", customer_id="c2", amount=32545, status="paid", date=dt.date(2023, 6, 9)),
  dict(id="i9", customer_id="c3", amount=1250, status="paid", date=dt.date(2023, 6, 17)),
]

REVENUE = [
  dict(month="Jan", revenue=2000),
  dict(month="Feb", revenue=1800),
  dict(month="Mar", revenue=2200),
]


def _sqlite_pool(tmp_path, customers=(), invoices=(), revenue=()):
  engine = build_engine(f"sqlite:///{(tmp_path / 'invoices.sqlite').as_posix()}")
  init_db(engine)
  with Session(engine) as session:
    session.add_all([Customer(**c) for c in customers])
    session.commit()
    session.add_all([Invoice(**i) for i in invoices])
    session.add_all([Revenue(**r) for r in revenue])
    session.commit()
  return EnginePool(engine)


@pytest.fixture
def empty_pool(tmp_path):
  pool = _sqlite_pool(tmp_path)
  yield pool
  pool.close()


@pytest.fixture
def seeded_pool(tmp_path):
  pool = _sqlite_pool(tmp_path, CUSTOMERS, INVOICES, REVENUE)
  yield pool
  pool.close()


@pytest.fixture
def no_revenue_delay(monkeypatch):
  monkeypatch.setattr(config, "REVENUE_DELAY_SECONDS", 0.0)


@pytest.fixture
def make_client(no_revenue_delay):
  def _make(pool):
    app.dependency_overrides[get_pool] = lambda: pool
    return TestClient(app)

  yield _make
  app.dependency_overrides.clear()
