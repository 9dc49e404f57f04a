"""
Pydantic models for check-in and check-out uploads.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class PhotoUpload(BaseModel):
    """A captured selfie ready to be sent as a multipart file part."""

    content: bytes = Field(..., description="Raw image bytes.")
    content_type: str = Field("image/jpeg", description="MIME type of the image.")
    filename: Optional[str] = Field(
        None,
        description="Overrides the default checkin.jpg / checkout.jpg part name.",
    )

    @classmethod
    def from_path(cls, path: str | Path, *, content_type: str = "image/jpeg") -> "PhotoUpload":
        file_path = Path(path)
        return cls(content=file_path.read_bytes(), content_type=content_type, filename=file_path.name)


def _decimal_degrees(value: float) -> str:
    # Plain positional notation; str() switches to exponents below 1e-4.
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


class Coordinates(BaseModel):
    """Decimal-degree location captured alongside the photo."""

    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    def as_form_fields(self) -> Dict[str, str]:
        return {
            "latitude": _decimal_degrees(self.latitude),
            "longitude": _decimal_degrees(self.longitude),
        }


class TimeLog(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str | int
    check_in: str = Field(..., alias="checkIn")
    check_out: Optional[str] = Field(None, alias="checkOut")
    check_in_photo: Optional[str] = Field(None, alias="checkInPhoto")
    check_out_photo: Optional[str] = Field(None, alias="checkOutPhoto")
    check_in_latitude: Optional[float] = Field(None, alias="checkInLatitude")
    check_in_longitude: Optional[float] = Field(None, alias="checkInLongitude")
    check_out_latitude: Optional[float] = Field(None, alias="checkOutLatitude")
    check_out_longitude: Optional[float] = Field(None, alias="checkOutLongitude")


class TimeLogResponse(BaseModel):
    """Response of the check-in and check-out endpoints."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    message: str
    time_log: TimeLog = Field(..., alias="timeLog")


__all__ = ["Coordinates", "PhotoUpload", "TimeLog", "TimeLogResponse"]
