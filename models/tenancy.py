from sqlalchemy import Column, Integer, Text, Float, Boolean, ForeignKey, CheckConstraint
from .base import Base


class Tenancy(Base):
     """
     Tenancy model - a lease between the landlord and a tenant.
     Maps to the 'tenancies' table.

     addressId is a plain reference: deleting an address leaves it dangling,
     and reads join addresses with an outer join.
     """
     __tablename__ = "tenancies"
     __table_args__ = (
          CheckConstraint('"monthlyDueDate" BETWEEN 1 AND 28', name="ck_tenancies_monthly_due_date"),
     )

     id = Column(Integer, primary_key=True, autoincrement=True)
     name = Column(Text, nullable=True, default="")
     contact = Column(Text, nullable=True, default="")
     address_id = Column("addressId", Integer, ForeignKey("addresses.id"), nullable=True)

     # Lease
     lease_start_date = Column("leaseStartDate", Text, nullable=True)  # yyyy-MM-dd HH:mm:ss
     lease_agreement_signed = Column("leaseAgreementSigned", Boolean, nullable=True, default=False)
     agreement_signed_date = Column("agreementSignedDate", Text, nullable=True)

     # Money
     advance_amount = Column("advanceAmount", Float, nullable=True, default=0.0)
     agreed_rent = Column("agreedRent", Float, nullable=True, default=0.0)
     monthly_due_date = Column("monthlyDueDate", Integer, nullable=True, default=1)

     comments = Column(Text, nullable=True, default="")

     def __repr__(self):
          return f"<Tenancy(id={self.id}, name='{self.name}', monthly_due_date={self.monthly_due_date})>"
