"""Request bodies for the manager-facing company endpoints."""

from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _digits(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    return re.sub(r"\D", "", value)


class UpdateCompanyData(BaseModel):
    """Company profile update; unset fields are omitted from the request."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=3)
    cnpj: str
    corporate_name: Optional[str] = Field(None, alias="corporateName")
    email: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    address: Optional[str] = None
    address_number: Optional[str] = Field(None, alias="addressNumber")
    address_complement: Optional[str] = Field(None, alias="addressComplement")
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")
    country: Optional[str] = None
    description: Optional[str] = None

    @field_validator("cnpj")
    @classmethod
    def _cnpj_digits(cls, value: str) -> str:
        digits = _digits(value) or ""
        if len(digits) != 14:
            raise ValueError("CNPJ must have 14 digits")
        return digits

    @field_validator("zip_code")
    @classmethod
    def _zip_digits(cls, value: Optional[str]) -> Optional[str]:
        return _digits(value)

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class CreateInvitationData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=3)
    expires_at: Optional[str] = Field(None, alias="expiresAt")

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class EmployeeApproval(BaseModel):
    approved: bool
    notes: Optional[str] = None

    def to_payload(self) -> dict:
        return self.model_dump(exclude_none=True)


__all__ = ["CreateInvitationData", "EmployeeApproval", "UpdateCompanyData"]
