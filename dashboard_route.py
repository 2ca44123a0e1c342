# dashboard_route.py
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Query

import data
from db import Pool, get_pool
from models import (
  CardData,
  CustomerField,
  CustomersTableRow,
  InvoiceForm,
  InvoicesTableRow,
  LatestInvoice,
  RevenueRow,
)

router = APIRouter(prefix="/api", tags=["dashboard"])

@router.get("/revenue", response_model=List[RevenueRow])
async def revenue(pool: Pool = Depends(get_pool)):
  return await data.fetch_revenue(pool)

@router.get("/cards", response_model=CardData)
async def cards(pool: Pool = Depends(get_pool)):
  return await data.fetch_card_data(pool)

@router.get("/invoices", response_model=List[InvoicesTableRow])
async def list_invoices(
  query: str = "",
  page: int = Query(1, ge=1),
  pool: Pool = Depends(get_pool),
):
  return await data.fetch_filtered_invoices(pool, query, page)

# static paths are registered before /invoices/{invoice_id}
@router.get("/invoices/latest", response_model=List[LatestInvoice])
async def latest_invoices(pool: Pool = Depends(get_pool)):
  return await data.fetch_latest_invoices(pool)

@router.get("/invoices/pages")
async def invoice_pages(query: str = "", pool: Pool = Depends(get_pool)):
  return {"totalPages": await data.fetch_invoices_pages(pool, query)}

@router.get("/invoices/{invoice_id}", response_model=InvoiceForm)
async def get_invoice(invoice_id: str, pool: Pool = Depends(get_pool)):
  inv = await data.fetch_invoice_by_id(pool, invoice_id)
  if inv is None:
    raise HTTPException(status_code=404, detail="Invoice not found")
  return inv

@router.get("/customers", response_model=List[CustomerField])
async def list_customers(pool: Pool = Depends(get_pool)):
  return await data.fetch_customers(pool)

@router.get("/customers/table", response_model=List[CustomersTableRow])
async def customers_table(query: str = "", pool: Pool = Depends(get_pool)):
  return await data.fetch_filtered_customers(pool, query)
