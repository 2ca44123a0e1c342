# models.py
import datetime as dt
from sqlmodel import SQLModel, Field

# Table models. This layer only reads them; they exist for local schema bootstrap.

class Customer(SQLModel, table=True):
  __tablename__ = "customers"
  id: str = Field(primary_key=True, index=True)
  name: str
  email: str
  image_url: str = ""

class Invoice(SQLModel, table=True):
  __tablename__ = "invoices"
  id: str = Field(primary_key=True, index=True)
  customer_id: str = Field(index=True, foreign_key="customers.id")
  amount: int  # minor units
  status: str = "pending"  # pending|paid
  date: dt.date

class Revenue(SQLModel, table=True):
  __tablename__ = "revenue"
  month: str = Field(primary_key=True)
  revenue: int

# Read projections returned by the query layer.

class RevenueRow(SQLModel):
  month: str
  revenue: int

class LatestInvoice(SQLModel):
  id: str
  name: str
  email: str
  image_url: str
  amount: str  # formatted currency

class CardData(SQLModel):
  numberOfInvoices: int
  numberOfCustomers: int
  totalPaidInvoices: str
  totalPendingInvoices: str

class InvoicesTableRow(SQLModel):
  id: str
  customer_id: str
  name: str
  email: str
  image_url: str
  date: dt.date
  amount: int  # minor units
  status: str

class InvoiceForm(SQLModel):
  id: str
  customer_id: str
  amount: float  # major units (stored / 100)
  status: str

class CustomerField(SQLModel):
  id: str
  name: str

class CustomersTableRow(SQLModel):
  id: str
  name: str
  email: str
  image_url: str
  total_invoices: int
  total_pending: str
  total_paid: str
