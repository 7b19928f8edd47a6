# garage/schemas/vehicle.py
"""
Request/response models for vehicles.
Field names follow the public API (placa, marca, modelo, ano, cor, tipo).
Plates are normalized here so every write path stores the same form.
"""

from datetime import datetime, date
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator

from garage.models.vehicle import PLATE_MAX_LENGTH, NAME_MAX_LENGTH, COLOR_MAX_LENGTH

VehicleKind = Literal["Carro", "Moto", "Caminhao"]

MIN_YEAR = 1900


def normalize_plate(value: str) -> str:
    plate = (value or "").strip().upper()
    if not plate:
        raise ValueError("Plate is required")
    if len(plate) > PLATE_MAX_LENGTH:
        raise ValueError(f"Plate cannot be longer than {PLATE_MAX_LENGTH} characters")
    return plate


def _check_length(text: str, label: str, max_length: int) -> str:
    if len(text) > max_length:
        raise ValueError(f"{label} cannot be longer than {max_length} characters")
    return text


def _required_text(value: Optional[str], label: str, max_length: int = NAME_MAX_LENGTH) -> str:
    text = (value or "").strip()
    if not text:
        raise ValueError(f"{label} is required")
    return _check_length(text, label, max_length)


def _optional_text(value: Optional[str], label: str, max_length: int) -> Optional[str]:
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None
    return _check_length(text, label, max_length)


def _check_year(value: int) -> int:
    max_year = date.today().year + 1
    if value < MIN_YEAR:
        raise ValueError(f"Year must be at least {MIN_YEAR}")
    if value > max_year:
        raise ValueError(f"Year cannot be later than {max_year}")
    return value


class VehicleCreate(BaseModel):
    placa: str
    marca: str
    modelo: str
    ano: int
    cor: Optional[str] = None
    tipo: VehicleKind = "Carro"

    @field_validator("placa")
    @classmethod
    def _placa(cls, v):
        return normalize_plate(v)

    @field_validator("marca")
    @classmethod
    def _marca(cls, v):
        return _required_text(v, "Make")

    @field_validator("modelo")
    @classmethod
    def _modelo(cls, v):
        return _required_text(v, "Model")

    @field_validator("ano")
    @classmethod
    def _ano(cls, v):
        return _check_year(v)

    @field_validator("cor")
    @classmethod
    def _cor(cls, v):
        return _optional_text(v, "Color", COLOR_MAX_LENGTH)


class VehicleUpdate(BaseModel):
    """Partial update: only fields present in the body are applied."""

    placa: Optional[str] = None
    marca: Optional[str] = None
    modelo: Optional[str] = None
    ano: Optional[int] = None
    cor: Optional[str] = None
    tipo: Optional[VehicleKind] = None

    @field_validator("placa")
    @classmethod
    def _placa(cls, v):
        return normalize_plate(v)

    @field_validator("marca")
    @classmethod
    def _marca(cls, v):
        return _required_text(v, "Make")

    @field_validator("modelo")
    @classmethod
    def _modelo(cls, v):
        return _required_text(v, "Model")

    @field_validator("ano")
    @classmethod
    def _ano(cls, v):
        if v is None:
            raise ValueError("Year is required")
        return _check_year(v)

    @field_validator("tipo")
    @classmethod
    def _tipo(cls, v):
        if v is None:
            raise ValueError("Vehicle kind is required")
        return v

    @field_validator("cor")
    @classmethod
    def _cor(cls, v):
        return _optional_text(v, "Color", COLOR_MAX_LENGTH)


class ShareRequest(BaseModel):
    email: str


class OwnerSummary(BaseModel):
    id: int = Field(alias="_id")
    email: str

    class Config:
        from_attributes = True
        populate_by_name = True


class VehicleOut(BaseModel):
    id: int = Field(alias="_id")
    placa: str
    marca: str
    modelo: str
    ano: int
    cor: Optional[str]
    tipo: str
    owner: OwnerSummary
    shared_with: List[OwnerSummary] = Field(alias="sharedWith")
    is_owner: bool = Field(alias="isOwner")
    created_at: datetime = Field(alias="createdAt")
    updated_at: datetime = Field(alias="updatedAt")

    class Config:
        populate_by_name = True

    @classmethod
    def for_viewer(cls, vehicle, viewer_id: int) -> "VehicleOut":
        """Build the response for `viewer_id`, with the owner joined in."""
        return cls(
            id=vehicle.id,
            placa=vehicle.placa,
            marca=vehicle.marca,
            modelo=vehicle.modelo,
            ano=vehicle.ano,
            cor=vehicle.cor,
            tipo=vehicle.tipo,
            owner=OwnerSummary.model_validate(vehicle.owner),
            shared_with=[OwnerSummary.model_validate(u) for u in vehicle.shared_with],
            is_owner=vehicle.owner_id == viewer_id,
            created_at=vehicle.created_at,
            updated_at=vehicle.updated_at,
        )
