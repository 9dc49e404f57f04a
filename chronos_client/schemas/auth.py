"""Schemas exchanged with the authentication endpoints."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .company import UpdateCompanyData, _digits


class TokenPair(BaseModel):
    """Access and refresh tokens issued by the backend."""

    model_config = ConfigDict(populate_by_name=True)

    access_token: str = Field(..., alias="accessToken")
    refresh_token: str = Field(..., alias="refreshToken")


class User(BaseModel):
    """User record as returned by the backend; unknown fields are kept."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | int
    name: str
    email: str
    cpf: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None
    photo: Optional[str] = None
    created_at: Optional[str] = Field(None, alias="createdAt")
    updated_at: Optional[str] = Field(None, alias="updatedAt")


class LoginPayload(BaseModel):
    email: str
    password: str


class RegisterData(BaseModel):
    """Payload for self-registration of a new user."""

    name: str = Field(..., min_length=1)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=1)
    cpf: Optional[str] = None
    department: Optional[str] = None
    position: Optional[str] = None


class _PersonalDetails(BaseModel):
    """Optional personal, address and banking fields shared by the sign-up flows."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=3)
    email: str = Field(..., min_length=3)
    password: str = Field(..., min_length=6)
    cpf: Optional[str] = None
    rg: Optional[str] = None
    birth_date: Optional[str] = Field(None, alias="birthDate")
    gender: Optional[str] = None
    marital_status: Optional[str] = Field(None, alias="maritalStatus")
    phone: Optional[str] = None
    mobile_phone: Optional[str] = Field(None, alias="mobilePhone")
    address: Optional[str] = None
    address_number: Optional[str] = Field(None, alias="addressNumber")
    address_complement: Optional[str] = Field(None, alias="addressComplement")
    neighborhood: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    zip_code: Optional[str] = Field(None, alias="zipCode")
    country: Optional[str] = None
    bank_name: Optional[str] = Field(None, alias="bankName")
    bank_account: Optional[str] = Field(None, alias="bankAccount")
    bank_agency: Optional[str] = Field(None, alias="bankAgency")
    bank_account_type: Optional[str] = Field(None, alias="bankAccountType")
    pix: Optional[str] = None
    emergency_contact_name: Optional[str] = Field(None, alias="emergencyContactName")
    emergency_contact_phone: Optional[str] = Field(None, alias="emergencyContactPhone")
    emergency_contact_relationship: Optional[str] = Field(
        None, alias="emergencyContactRelationship"
    )
    education: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("cpf", "zip_code")
    @classmethod
    def _strip_formatting(cls, value: Optional[str]) -> Optional[str]:
        return _digits(value) or None

    def to_payload(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)


class ManagerRegisterData(_PersonalDetails):
    """Manager sign-up; the company is created in the same request."""

    company: UpdateCompanyData


class EmployeeRegisterData(_PersonalDetails):
    """Employee sign-up against an invitation code issued by a manager."""

    invitation_code: str = Field(..., alias="invitationCode", min_length=1)
    employee_id: Optional[str] = Field(None, alias="employeeId")
    department: Optional[str] = None
    position: Optional[str] = None
    hire_date: Optional[str] = Field(None, alias="hireDate")
    salary: Optional[float] = Field(None, ge=0)
    work_schedule: Optional[str] = Field(None, alias="workSchedule")
    employment_type: Optional[str] = Field(None, alias="employmentType")
    direct_supervisor: Optional[str] = Field(None, alias="directSupervisor")


class RefreshTokenResponse(TokenPair):
    """Response of ``POST /auth/refresh-token``."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")


class AuthResponse(BaseModel):
    """Response of login and register."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message: Optional[str] = None
    user: Optional[User] = None
    access_token: Optional[str] = Field(None, alias="accessToken")
    refresh_token: Optional[str] = Field(None, alias="refreshToken")
    requires_approval: bool = Field(False, alias="requiresApproval")

    def token_pair(self) -> Optional[TokenPair]:
        if self.access_token and self.refresh_token:
            return TokenPair(access_token=self.access_token, refresh_token=self.refresh_token)
        return None


class ProfileResponse(BaseModel):
    """Response of ``GET /auth/profile``."""

    model_config = ConfigDict(extra="allow")

    user: User


__all__ = [
    "AuthResponse",
    "EmployeeRegisterData",
    "LoginPayload",
    "ManagerRegisterData",
    "ProfileResponse",
    "RefreshTokenResponse",
    "RegisterData",
    "TokenPair",
    "User",
]
