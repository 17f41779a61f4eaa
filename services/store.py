# services/store.py
"""
Tenancy Store - persistence for addresses, tenancies and rent payments.

The store is constructed with a Database and handed to whoever needs it
(routers, the reminder scheduler); there is no shared global instance.
Every call runs in its own short session:
1. Writes raise a typed failure (SaveFailed / UpdateFailed / DeleteFailed /
   InvalidId) if the underlying statement does not complete
2. Single-record reads return None when nothing matches
3. Tenancy reads outer-join addresses, so a missing or deleted address
   leaves ``Tenancy.address`` unset instead of dropping the tenancy
"""
import logging
from typing import Dict, List, Optional, Union

from sqlalchemy import delete, desc
from sqlalchemy.exc import SQLAlchemyError

from database import Database
from models import (
     Address as AddressModel,
     Tenancy as TenancyModel,
     RentPayment as RentPaymentModel,
)
from schemas import (
     Address,
     AddressCreate,
     Tenancy,
     TenancyCreate,
     RentPayment,
     RentPaymentCreate,
)
from .errors import InvalidId, SaveFailed, UpdateFailed, DeleteFailed
from .timestamps import format_timestamp, parse_timestamp

logger = logging.getLogger(__name__)

ADDRESS_FIELDS = ("title", "line1", "line2", "city", "state", "pin_code")


class TenancyStore:
     """CRUD access to the three record types."""

     def __init__(self, database: Database):
          self.database = database

     @property
     def strict_dates(self) -> bool:
          return self.database.settings.strict_date_parsing

     # ------------------------------------------------------------------
     # Row <-> schema conversion
     # ------------------------------------------------------------------

     @staticmethod
     def _address_values(address: Union[AddressCreate, Address]) -> dict:
          return {field: getattr(address, field) for field in ADDRESS_FIELDS}

     @staticmethod
     def _address_from_row(row: AddressModel) -> Address:
          return Address(
               id=row.id,
               title=row.title or "",
               line1=row.line1 or "",
               line2=row.line2 or "",
               city=row.city or "",
               state=row.state or "",
               pin_code=row.pin_code or "",
          )

     @staticmethod
     def _tenancy_values(tenancy: Union[TenancyCreate, Tenancy]) -> dict:
          address_id = tenancy.address_id
          linked = getattr(tenancy, "address", None)
          if address_id is None and linked is not None:
               address_id = linked.id
          return {
               "name": tenancy.name,
               "contact": tenancy.contact,
               "address_id": address_id,
               "lease_start_date": format_timestamp(tenancy.lease_start_date),
               "lease_agreement_signed": tenancy.lease_agreement_signed,
               "advance_amount": tenancy.advance_amount,
               "agreed_rent": tenancy.agreed_rent,
               "monthly_due_date": tenancy.monthly_due_date,
               "agreement_signed_date": format_timestamp(tenancy.agreement_signed_date),
               "comments": tenancy.comments,
          }

     def _tenancy_from_row(self, row: TenancyModel, address_row: Optional[AddressModel]) -> Tenancy:
          return Tenancy(
               id=row.id,
               name=row.name or "",
               contact=row.contact or "",
               address_id=row.address_id,
               address=self._address_from_row(address_row) if address_row is not None else None,
               lease_start_date=parse_timestamp(row.lease_start_date, self.strict_dates),
               lease_agreement_signed=bool(row.lease_agreement_signed),
               advance_amount=row.advance_amount or 0.0,
               agreed_rent=row.agreed_rent or 0.0,
               monthly_due_date=row.monthly_due_date or 1,
               agreement_signed_date=parse_timestamp(row.agreement_signed_date, self.strict_dates),
               comments=row.comments or "",
          )

     def _payment_from_row(self, row: RentPaymentModel) -> RentPayment:
          return RentPayment(
               id=row.id,
               tenancy_id=row.tenancy_id,
               amount=row.amount,
               paid_on=parse_timestamp(row.paid_on, self.strict_dates),
               notes=row.notes or "",
          )

     # ------------------------------------------------------------------
     # Addresses
     # ------------------------------------------------------------------

     def save_address(self, address: Union[AddressCreate, Address]) -> int:
          """
          Insert an address.

          Returns:
               The newly assigned identity

          Raises:
               SaveFailed: If the insert does not complete
          """
          row = AddressModel(**self._address_values(address))
          try:
               with self.database.session() as session:
                    session.add(row)
                    session.flush()
                    new_id = row.id
          except SQLAlchemyError as e:
               logger.exception("Failed to save address '%s'", address.title)
               raise SaveFailed(f"Could not save address: {e}") from e

          if new_id is None:
               raise SaveFailed("Address insert returned no identity")
          logger.info("Saved address id=%s", new_id)
          return new_id

     def update_address(self, address: Address) -> None:
          """
          Overwrite a saved address.

          Raises:
               InvalidId: If the address has no identity or it is not in the store
               UpdateFailed: If the write does not complete
          """
          address_id = getattr(address, "id", None)
          if address_id is None:
               raise InvalidId("Address")
          try:
               with self.database.session() as session:
                    row = session.get(AddressModel, address_id)
                    if row is None:
                         raise InvalidId("Address", address_id)
                    for field, value in self._address_values(address).items():
                         setattr(row, field, value)
          except SQLAlchemyError as e:
               logger.exception("Failed to update address id=%s", address_id)
               raise UpdateFailed(f"Could not update address {address_id}: {e}") from e

     def delete_address(self, address_id: int) -> None:
          """
          Delete an address by identity.

          Tenancies pointing at it keep their addressId; reads treat the
          dangling reference as "no address".

          Raises:
               DeleteFailed: If the delete does not complete
          """
          try:
               with self.database.session() as session:
                    session.execute(delete(AddressModel).where(AddressModel.id == address_id))
          except SQLAlchemyError as e:
               logger.exception("Failed to delete address id=%s", address_id)
               raise DeleteFailed(f"Could not delete address {address_id}: {e}") from e
          logger.info("Deleted address id=%s", address_id)

     def get_all_addresses(self) -> List[Address]:
          with self.database.session() as session:
               rows = session.query(AddressModel).order_by(AddressModel.id).all()
               return [self._address_from_row(row) for row in rows]

     def get_address(self, address_id: int) -> Optional[Address]:
          with self.database.session() as session:
               row = session.get(AddressModel, address_id)
               return self._address_from_row(row) if row is not None else None

     # ------------------------------------------------------------------
     # Tenancies
     # ------------------------------------------------------------------

     def save_tenancy(self, tenancy: Union[TenancyCreate, Tenancy]) -> int:
          """
          Insert a tenancy.

          Returns:
               The newly assigned identity

          Raises:
               SaveFailed: If the insert does not complete
          """
          row = TenancyModel(**self._tenancy_values(tenancy))
          try:
               with self.database.session() as session:
                    session.add(row)
                    session.flush()
                    new_id = row.id
          except SQLAlchemyError as e:
               logger.exception("Failed to save tenancy for '%s'", tenancy.name)
               raise SaveFailed(f"Could not save tenancy: {e}") from e

          if new_id is None:
               raise SaveFailed("Tenancy insert returned no identity")
          logger.info("Saved tenancy id=%s for '%s'", new_id, tenancy.name)
          return new_id

     def update_tenancy(self, tenancy: Tenancy) -> None:
          """
          Overwrite a saved tenancy.

          Raises:
               InvalidId: If the tenancy has no identity or it is not in the store
               UpdateFailed: If the write does not complete
          """
          tenancy_id = getattr(tenancy, "id", None)
          if tenancy_id is None:
               raise InvalidId("Tenancy")
          try:
               with self.database.session() as session:
                    row = session.get(TenancyModel, tenancy_id)
                    if row is None:
                         raise InvalidId("Tenancy", tenancy_id)
                    for field, value in self._tenancy_values(tenancy).items():
                         setattr(row, field, value)
          except SQLAlchemyError as e:
               logger.exception("Failed to update tenancy id=%s", tenancy_id)
               raise UpdateFailed(f"Could not update tenancy {tenancy_id}: {e}") from e

     def delete_tenancy(self, tenancy_id: int) -> None:
          """
          Delete a tenancy by identity. Its payments are left in place.

          Raises:
               DeleteFailed: If the delete does not complete
          """
          try:
               with self.database.session() as session:
                    session.execute(delete(TenancyModel).where(TenancyModel.id == tenancy_id))
          except SQLAlchemyError as e:
               logger.exception("Failed to delete tenancy id=%s", tenancy_id)
               raise DeleteFailed(f"Could not delete tenancy {tenancy_id}: {e}") from e
          logger.info("Deleted tenancy id=%s", tenancy_id)

     def _tenancy_query(self, session):
          return (
               session.query(TenancyModel, AddressModel)
               .outerjoin(AddressModel, TenancyModel.address_id == AddressModel.id)
          )

     def get_all_tenancies(self) -> List[Tenancy]:
          with self.database.session() as session:
               rows = self._tenancy_query(session).order_by(TenancyModel.id).all()
               return [self._tenancy_from_row(tenancy, address) for tenancy, address in rows]

     def get_tenancy_ids(self) -> List[int]:
          """Identities of every tenancy, without decoding the rows."""
          with self.database.session() as session:
               return [row[0] for row in session.query(TenancyModel.id).order_by(TenancyModel.id)]

     def get_tenancy(self, tenancy_id: int) -> Optional[Tenancy]:
          with self.database.session() as session:
               row = self._tenancy_query(session).filter(TenancyModel.id == tenancy_id).first()
               if row is None:
                    return None
               return self._tenancy_from_row(row[0], row[1])

     # ------------------------------------------------------------------
     # Rent payments (append-only)
     # ------------------------------------------------------------------

     def save_rent_payment(self, payment: RentPaymentCreate) -> int:
          """
          Append a rent payment to a tenancy's ledger.

          Returns:
               The newly assigned identity

          Raises:
               InvalidId: If the tenancy does not exist
               SaveFailed: If the insert does not complete
          """
          row = RentPaymentModel(
               tenancy_id=payment.tenancy_id,
               amount=payment.amount,
               paid_on=format_timestamp(payment.paid_on),
               notes=payment.notes,
          )
          try:
               with self.database.session() as session:
                    if session.get(TenancyModel, payment.tenancy_id) is None:
                         raise InvalidId("Tenancy", payment.tenancy_id)
                    session.add(row)
                    session.flush()
                    new_id = row.id
          except SQLAlchemyError as e:
               logger.exception("Failed to save rent payment for tenancy id=%s", payment.tenancy_id)
               raise SaveFailed(f"Could not save rent payment: {e}") from e

          if new_id is None:
               raise SaveFailed("Rent payment insert returned no identity")
          logger.info(
               "Saved rent payment id=%s tenancy_id=%s amount=%.2f",
               new_id, payment.tenancy_id, payment.amount,
          )
          return new_id

     def _payments_query(self, session):
          # Text dates sort chronologically; id breaks ties between same-second inserts
          return session.query(RentPaymentModel).order_by(
               desc(RentPaymentModel.paid_on), desc(RentPaymentModel.id)
          )

     def get_latest_rent_payment(self, tenancy_id: int) -> Optional[RentPayment]:
          with self.database.session() as session:
               row = (
                    self._payments_query(session)
                    .filter(RentPaymentModel.tenancy_id == tenancy_id)
                    .first()
               )
               return self._payment_from_row(row) if row is not None else None

     def get_rent_payments(self, tenancy_id: int) -> List[RentPayment]:
          with self.database.session() as session:
               rows = (
                    self._payments_query(session)
                    .filter(RentPaymentModel.tenancy_id == tenancy_id)
                    .all()
               )
               return [self._payment_from_row(row) for row in rows]

     def get_all_rent_payments(self) -> List[RentPayment]:
          with self.database.session() as session:
               rows = self._payments_query(session).all()
               return [self._payment_from_row(row) for row in rows]

     def get_latest_payments_by_tenancy(self) -> Dict[int, RentPayment]:
          """Latest payment for every tenancy that has one."""
          latest: Dict[int, RentPayment] = {}
          for payment in self.get_all_rent_payments():
               latest.setdefault(payment.tenancy_id, payment)
          return latest
