# main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import CORS_ORIGINS
from dashboard_route import router as dashboard_router
from data import DataFetchError
from db import close_pool
from log import setup_logging
from query_route import router as query_router

setup_logging()


@asynccontextmanager
async def lifespan(app: FastAPI):
  yield
  close_pool()


app = FastAPI(title="Invoicing Dashboard Backend", version="1.0.0", lifespan=lifespan)
app.add_middleware(
  CORSMiddleware,
  allow_origins=CORS_ORIGINS,
  allow_credentials=True,
  allow_methods=["GET"],
  allow_headers=["*"],
)

app.include_router(query_router)
app.include_router(dashboard_router)


@app.exception_handler(DataFetchError)
async def data_fetch_error_handler(request: Request, exc: DataFetchError):
  return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.get("/health")
def health():
  return {"ok": True}
