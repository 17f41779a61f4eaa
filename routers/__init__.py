from .addresses import router as addresses_router
from .tenancies import router as tenancies_router
from .payments import router as payments_router
from .reminders import router as reminders_router
from .settings import router as settings_router

__all__ = [
     "addresses_router",
     "tenancies_router",
     "payments_router",
     "reminders_router",
     "settings_router",
]
