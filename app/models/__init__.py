from app.models.attendance import AttendanceRecord
from app.models.billing import Billing, BillingItem, Expense
from app.models.booking import Booking
from app.models.inventory import InventoryCategory, InventoryItem
from app.models.job_card import JobCard, JobCardItem
from app.models.purchase import Purchase
from app.models.staff import Staff

__all__ = [
    "AttendanceRecord",
    "Billing",
    "BillingItem",
    "Booking",
    "Expense",
    "InventoryCategory",
    "InventoryItem",
    "JobCard",
    "JobCardItem",
    "Purchase",
    "Staff",
]
