# garage/routers/maintenance.py
"""Maintenance history per vehicle. Open to the owner and to shared viewers."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from garage.database import get_db
from garage.schemas.auth import MessageOut
from garage.schemas.maintenance import MaintenanceCreate, MaintenanceOut
from garage.security import SessionPrincipal, get_current_user
from garage.services import maintenance_service

router = APIRouter()


@router.post("/veiculos/{vehicle_id}/manutencoes", status_code=status.HTTP_201_CREATED,
             response_model=MaintenanceOut, summary="Add a maintenance record")
def create_record(vehicle_id: int, body: MaintenanceCreate, db: Session = Depends(get_db),
                  current_user: SessionPrincipal = Depends(get_current_user)):
    return maintenance_service.create_record(db, vehicle_id, current_user.id, body)


@router.get("/veiculos/{vehicle_id}/manutencoes", response_model=list[MaintenanceOut],
            summary="Maintenance history, most recent first")
def list_records(vehicle_id: int, db: Session = Depends(get_db),
                 current_user: SessionPrincipal = Depends(get_current_user)):
    return maintenance_service.list_for_vehicle(db, vehicle_id, current_user.id)


@router.delete("/manutencoes/{record_id}", response_model=MessageOut, summary="Remove a maintenance record")
def delete_record(record_id: int, db: Session = Depends(get_db),
                  current_user: SessionPrincipal = Depends(get_current_user)):
    maintenance_service.delete_record(db, record_id, current_user.id)
    return MessageOut(message="Maintenance record removed successfully")
