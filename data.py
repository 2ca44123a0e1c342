# data.py
import asyncio
import math
from contextlib import asynccontextmanager
from typing import List, Optional

import config
from db import Pool
from log import get_logger
from models import (
  CardData,
  CustomerField,
  CustomersTableRow,
  InvoiceForm,
  InvoicesTableRow,
  LatestInvoice,
  RevenueRow,
)
from utils import format_currency

logger = get_logger(__name__)

ITEMS_PER_PAGE = 6


class DataFetchError(Exception):
  """The only error the query layer raises. Callers see a fixed message, never the cause."""

  def __init__(self, label: str, subject: Optional[str] = None, cause: Optional[BaseException] = None):
    self.label = label
    self.cause = cause
    super().__init__(f"Failed to fetch {subject or label}.")


@asynccontextmanager
async def fetching(label: str, subject: Optional[str] = None):
  try:
    yield
  except Exception as e:
    logger.error("database_error", operation=label, error=repr(e), exc_info=e)
    raise DataFetchError(label, subject, cause=e) from None


# Shared by the paginated list and the page count so both always agree.
INVOICE_SEARCH_FROM = """
  FROM invoices
  JOIN customers ON invoices.customer_id = customers.id
  WHERE
    LOWER(customers.name) LIKE LOWER(:term) OR
    LOWER(customers.email) LIKE LOWER(:term) OR
    CAST(invoices.amount AS TEXT) LIKE :term OR
    CAST(invoices.date AS TEXT) LIKE :term OR
    LOWER(invoices.status) LIKE LOWER(:term)
"""


def search_term(query: str) -> str:
  return f"%{query}%"


def page_offset(page: int) -> int:
  return (page - 1) * ITEMS_PER_PAGE


def total_pages(count: int) -> int:
  return math.ceil(count / ITEMS_PER_PAGE)


async def fetch_revenue(pool: Pool, delay: Optional[float] = None) -> List[RevenueRow]:
  delay = config.REVENUE_DELAY_SECONDS if delay is None else delay
  async with fetching("revenue", "revenue data"):
    if delay > 0:
      logger.info("fetching_revenue", delay_seconds=delay)
      await asyncio.sleep(delay)
    rows = await pool.query("SELECT month, revenue FROM revenue")
    logger.info("revenue_fetched", rows=len(rows), delay_seconds=delay)
    return [RevenueRow(**r) for r in rows]


async def fetch_latest_invoices(pool: Pool) -> List[LatestInvoice]:
  async with fetching("latest invoices", "the latest invoices"):
    rows = await pool.query("""
      SELECT invoices.amount, customers.name, customers.image_url, customers.email, invoices.id
      FROM invoices
      JOIN customers ON invoices.customer_id = customers.id
      ORDER BY invoices.date DESC
      LIMIT 5
    """)
    return [LatestInvoice(**{**r, "amount": format_currency(r["amount"])}) for r in rows]


async def fetch_card_data(pool: Pool) -> CardData:
  async with fetching("card data"):
    invoice_count, customer_count, invoice_status = await asyncio.gather(
      pool.query("SELECT COUNT(*) AS count FROM invoices"),
      pool.query("SELECT COUNT(*) AS count FROM customers"),
      pool.query("""
        SELECT
          SUM(CASE WHEN status = 'paid' THEN amount ELSE 0 END) AS paid,
          SUM(CASE WHEN status = 'pending' THEN amount ELSE 0 END) AS pending
        FROM invoices
      """),
    )
    status = invoice_status[0]
    return CardData(
      numberOfInvoices=int(invoice_count[0]["count"]),
      numberOfCustomers=int(customer_count[0]["count"]),
      totalPaidInvoices=format_currency(status["paid"] or 0),
      totalPendingInvoices=format_currency(status["pending"] or 0),
    )


async def fetch_filtered_invoices(pool: Pool, query: str, page: int) -> List[InvoicesTableRow]:
  async with fetching("invoices"):
    rows = await pool.query(
      f"""
      SELECT
        invoices.id,
        invoices.customer_id,
        invoices.amount,
        invoices.date,
        invoices.status,
        customers.name,
        customers.email,
        customers.image_url
      {INVOICE_SEARCH_FROM}
      ORDER BY invoices.date DESC
      LIMIT :limit OFFSET :offset
      """,
      {"term": search_term(query), "limit": ITEMS_PER_PAGE, "offset": page_offset(page)},
    )
    return [InvoicesTableRow(**r) for r in rows]


async def fetch_invoices_pages(pool: Pool, query: str) -> int:
  async with fetching("total number of invoices"):
    rows = await pool.query(
      f"SELECT COUNT(*) AS count {INVOICE_SEARCH_FROM}",
      {"term": search_term(query)},
    )
    return total_pages(int(rows[0]["count"]))


async def fetch_invoice_by_id(pool: Pool, invoice_id: str) -> Optional[InvoiceForm]:
  """Returns None when no invoice has this id; that is not a failure."""
  async with fetching("invoice"):
    rows = await pool.query(
      """
      SELECT id, customer_id, amount, status
      FROM invoices
      WHERE id = :id
      """,
      {"id": invoice_id},
    )
    if not rows:
      return None
    row = rows[0]
    return InvoiceForm(**{**row, "amount": row["amount"] / 100})


async def fetch_customers(pool: Pool) -> List[CustomerField]:
  async with fetching("customers", "all customers"):
    rows = await pool.query("""
      SELECT id, name
      FROM customers
      ORDER BY name ASC
    """)
    return [CustomerField(**r) for r in rows]


async def fetch_filtered_customers(pool: Pool, query: str) -> List[CustomersTableRow]:
  async with fetching("customer table"):
    rows = await pool.query(
      """
      SELECT
        customers.id,
        customers.name,
        customers.email,
        customers.image_url,
        COUNT(invoices.id) AS total_invoices,
        SUM(CASE WHEN invoices.status = 'pending' THEN invoices.amount ELSE 0 END) AS total_pending,
        SUM(CASE WHEN invoices.status = 'paid' THEN invoices.amount ELSE 0 END) AS total_paid
      FROM customers
      LEFT JOIN invoices ON customers.id = invoices.customer_id
      WHERE
        LOWER(customers.name) LIKE LOWER(:term) OR
        LOWER(customers.email) LIKE LOWER(:term)
      GROUP BY customers.id, customers.name, customers.email, customers.image_url
      ORDER BY customers.name ASC
      """,
      {"term": search_term(query)},
    )
    return [
      CustomersTableRow(**{
        **r,
        "total_pending": format_currency(r["total_pending"] or 0),
        "total_paid": format_currency(r["total_paid"] or 0),
      })
      for r in rows
    ]
