# routers/addresses.py
"""
Address API routes.

CRUD for the properties a landlord rents out. Deleting an address does not
touch tenancies that reference it; they simply read back without one.
"""
from typing import List
from fastapi import APIRouter, Depends, HTTPException, Path, Response, status

from dependencies import get_store, http_error
from schemas import Address, AddressCreate
from services import TenancyStore, TenancyStoreError

router = APIRouter(prefix="/api/addresses", tags=["addresses"])


@router.post(
     "",
     response_model=Address,
     status_code=status.HTTP_201_CREATED,
     summary="Create an address"
)
def create_address(body: AddressCreate, store: TenancyStore = Depends(get_store)):
     try:
          address_id = store.save_address(body)
     except TenancyStoreError as e:
          raise http_error(e)
     return Address(id=address_id, **body.model_dump())


@router.get("", response_model=List[Address], summary="List addresses")
def list_addresses(store: TenancyStore = Depends(get_store)):
     return store.get_all_addresses()


@router.get("/{address_id}", response_model=Address, summary="Get an address")
def get_address(address_id: int = Path(..., gt=0), store: TenancyStore = Depends(get_store)):
     address = store.get_address(address_id)
     if address is None:
          raise HTTPException(
               status_code=status.HTTP_404_NOT_FOUND,
               detail=f"Address with ID {address_id} not found"
          )
     return address


@router.put("/{address_id}", response_model=Address, summary="Update an address")
def update_address(
     body: AddressCreate,
     address_id: int = Path(..., gt=0),
     store: TenancyStore = Depends(get_store)
):
     """
     Replace every field of a saved address.

     Returns 404 if the address has never been saved.
     """
     address = Address(id=address_id, **body.model_dump())
     try:
          store.update_address(address)
     except TenancyStoreError as e:
          raise http_error(e)
     return address


@router.delete("/{address_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete an address")
def delete_address(address_id: int = Path(..., gt=0), store: TenancyStore = Depends(get_store)):
     try:
          store.delete_address(address_id)
     except TenancyStoreError as e:
          raise http_error(e)
     return Response(status_code=status.HTTP_204_NO_CONTENT)
