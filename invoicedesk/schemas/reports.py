from typing import List

from pydantic import BaseModel


class ClientRevenue(BaseModel):
    client_id: int
    name: str
    total_invoices: int
    total_amount: str


class DailyRevenue(BaseModel):
    date: str
    amount: str
    count: int


class InvoiceSummary(BaseModel):
    time_frame: str
    total_invoices: int
    total_amount: str
    average_invoice_value: str
    top_clients: List[ClientRevenue]
    daily: List[DailyRevenue]
