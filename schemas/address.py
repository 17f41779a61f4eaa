"""
Pydantic schemas for addresses (the properties a landlord rents out).

AddressCreate has no identity yet; Address is a saved record and always
carries its id, so only saved addresses can be passed to an update.
"""
from pydantic import BaseModel, Field, ConfigDict


class AddressBase(BaseModel):
     """Fields shared by unsaved and saved addresses."""
     title: str = Field(default="", max_length=255, description="Short name for the property")
     line1: str = Field(default="", description="First address line")
     line2: str = Field(default="", description="Second address line")
     city: str = Field(default="")
     state: str = Field(default="")
     pin_code: str = Field(default="", description="Postal code")


class AddressCreate(AddressBase):
     """Schema for an address that has not been saved yet."""

     model_config = ConfigDict(
          json_schema_extra={
               "example": {
                    "title": "Unit 2",
                    "line1": "456 Street",
                    "line2": "",
                    "city": "Bengaluru",
                    "state": "Karnataka",
                    "pin_code": "560001"
               }
          }
     )


class Address(AddressBase):
     """A saved address."""
     id: int = Field(..., gt=0, description="Identity assigned by the store")

     model_config = ConfigDict(from_attributes=True)
