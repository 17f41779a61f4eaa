from .base import Base
from .address import Address
from .tenancy import Tenancy
from .rent_payment import RentPayment

__all__ = [
     "Base",
     "Address",
     "Tenancy",
     "RentPayment",
]
