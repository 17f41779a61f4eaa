from .address import AddressCreate, Address
from .tenancy import TenancyCreate, Tenancy, TenancyDueResponse, RenewalStatus
from .rent_payment import (
     RentPaymentCreate,
     RentPayment,
     RentPaymentRecorded,
     AmountText,
     ParsedAmount,
)
from .reminder import (
     PendingReminderResponse,
     ScheduleResultResponse,
     CheckRequest,
     SettingsResponse,
     DatabasePathUpdate,
     DatabaseStatus,
     ExportRequest,
)

__all__ = [
     "AddressCreate",
     "Address",
     "TenancyCreate",
     "Tenancy",
     "TenancyDueResponse",
     "RenewalStatus",
     "RentPaymentCreate",
     "RentPayment",
     "RentPaymentRecorded",
     "AmountText",
     "ParsedAmount",
     "PendingReminderResponse",
     "ScheduleResultResponse",
     "CheckRequest",
     "SettingsResponse",
     "DatabasePathUpdate",
     "DatabaseStatus",
     "ExportRequest",
]
