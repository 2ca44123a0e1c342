# query_route.py
from fastapi import APIRouter, Depends
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from db import Pool, get_pool
from log import get_logger

logger = get_logger(__name__)

router = APIRouter(tags=["query"])


async def list_invoices(pool: Pool):
  return await pool.query("""
    SELECT invoices.amount, customers.name
    FROM invoices
    JOIN customers ON invoices.customer_id = customers.id
    WHERE invoices.amount = 666
  """)


@router.get("/query")
async def query_invoices(pool: Pool = Depends(get_pool)):
  # unlike the dashboard routes, the raw error text is returned to the caller
  try:
    rows = await list_invoices(pool)
    return JSONResponse(jsonable_encoder(rows))
  except Exception as e:
    logger.error("query_route_failed", error=str(e))
    return JSONResponse({"error": str(e)}, status_code=500)
