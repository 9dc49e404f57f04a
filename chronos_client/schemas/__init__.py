"""Public schema exports."""

from .auth import (
    AuthResponse,
    EmployeeRegisterData,
    LoginPayload,
    ManagerRegisterData,
    ProfileResponse,
    RefreshTokenResponse,
    RegisterData,
    TokenPair,
    User,
)
from .company import CreateInvitationData, EmployeeApproval, UpdateCompanyData
from .timelog import Coordinates, PhotoUpload, TimeLog, TimeLogResponse

__all__ = [
    "AuthResponse",
    "Coordinates",
    "CreateInvitationData",
    "EmployeeApproval",
    "EmployeeRegisterData",
    "LoginPayload",
    "ManagerRegisterData",
    "PhotoUpload",
    "ProfileResponse",
    "RefreshTokenResponse",
    "RegisterData",
    "TimeLog",
    "TimeLogResponse",
    "TokenPair",
    "UpdateCompanyData",
    "User",
]
