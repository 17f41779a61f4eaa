from sqlalchemy import Column, Integer, Text
from .base import Base


class Address(Base):
     """
     Address model - a rental property the landlord manages.
     Maps to the 'addresses' table.
     """
     __tablename__ = "addresses"

     id = Column(Integer, primary_key=True, autoincrement=True)
     title = Column(Text, nullable=True, default="")
     line1 = Column(Text, nullable=True, default="")
     line2 = Column(Text, nullable=True, default="")
     city = Column(Text, nullable=True, default="")
     state = Column(Text, nullable=True, default="")
     pin_code = Column("pinCode", Text, nullable=True, default="")

     def __repr__(self):
          return f"<Address(id={self.id}, title='{self.title}')>"
