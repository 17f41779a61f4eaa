"""
RentPayment model - append-only ledger of rent received per tenancy.

There is no update or delete path; corrections are recorded as new rows.
"""
from sqlalchemy import Column, Integer, Text, Float, ForeignKey, Index
from .base import Base


class RentPayment(Base):
     """
     Rent payment entry. The latest payment for a tenancy is the first row
     ordered by paidOn DESC, id DESC.
     """
     __tablename__ = "rent_payments"
     __table_args__ = (
          Index("ix_rent_payments_tenancy_paid_on", "tenancyId", "paidOn"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     tenancy_id = Column("tenancyId", Integer, ForeignKey("tenancies.id"), nullable=False)
     amount = Column(Float, nullable=False)
     paid_on = Column("paidOn", Text, nullable=False)  # yyyy-MM-dd HH:mm:ss
     notes = Column(Text, nullable=True, default="")

     def __repr__(self):
          return f"<RentPayment(id={self.id}, tenancy_id={self.tenancy_id}, amount={self.amount})>"
