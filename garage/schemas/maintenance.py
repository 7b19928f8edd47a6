# garage/schemas/maintenance.py
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class MaintenanceCreate(BaseModel):
    descricao_servico: str = Field(alias="descricaoServico")
    custo: float = Field(ge=0, allow_inf_nan=False)
    quilometragem: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    data: Optional[datetime] = None     # Defaults to creation time

    class Config:
        populate_by_name = True

    @field_validator("descricao_servico")
    @classmethod
    def _descricao(cls, v):
        text = (v or "").strip()
        if not text:
            raise ValueError("Service description is required")
        return text

    @field_validator("data")
    @classmethod
    def _data(cls, v):
        # Stored as naive UTC, so offsets are applied before dropping tzinfo
        if v is not None and v.tzinfo is not None:
            return v.astimezone(timezone.utc).replace(tzinfo=None)
        return v


class MaintenanceOut(BaseModel):
    id: int = Field(alias="_id")
    descricao_servico: str = Field(alias="descricaoServico")
    data: datetime
    custo: float
    quilometragem: Optional[float]
    vehicle_id: int = Field(alias="veiculo")
    created_at: datetime = Field(alias="createdAt")

    class Config:
        from_attributes = True
        populate_by_name = True
