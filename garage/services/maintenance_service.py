# garage/services/maintenance_service.py
"""
Maintenance ledger: service history per vehicle.
Owners and shared viewers can add, list, and remove records.
"""

from datetime import datetime

from sqlalchemy.orm import Session

from garage.errors import NotFoundError
from garage.models.maintenance import MaintenanceRecord
from garage.schemas.maintenance import MaintenanceCreate
from garage.services.access_control import AccessMode, load_vehicle_for
from garage.utils.logger import get_logger

logger = get_logger(__name__)


def create_record(db: Session, vehicle_id: int, user_id: int, data: MaintenanceCreate) -> MaintenanceRecord:
    vehicle = load_vehicle_for(db, vehicle_id, user_id, AccessMode.WRITE)
    now = datetime.utcnow()
    record = MaintenanceRecord(
        descricao_servico=data.descricao_servico,
        data=data.data or now,
        custo=data.custo,
        quilometragem=data.quilometragem,
        vehicle_id=vehicle.id,
        created_at=now,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    logger.info(f"[MAINT] Record {record.id} added to vehicle {vehicle.id} by user {user_id}")
    return record


def list_for_vehicle(db: Session, vehicle_id: int, user_id: int) -> list:
    """Records for a vehicle, most recent first."""
    vehicle = load_vehicle_for(db, vehicle_id, user_id, AccessMode.READ)
    return (
        db.query(MaintenanceRecord)
        .filter(MaintenanceRecord.vehicle_id == vehicle.id)
        .order_by(MaintenanceRecord.data.desc(), MaintenanceRecord.id.desc())
        .all()
    )


def delete_record(db: Session, record_id: int, user_id: int):
    record = db.query(MaintenanceRecord).filter(MaintenanceRecord.id == record_id).first()
    if record is None:
        raise NotFoundError("Maintenance record not found")
    load_vehicle_for(db, record.vehicle_id, user_id, AccessMode.WRITE)
    db.delete(record)
    db.commit()
    logger.info(f"[MAINT] Record {record_id} removed by user {user_id}")


def delete_for_vehicle(db: Session, vehicle_id: int) -> int:
    """Bulk-delete a vehicle's records. Does not commit; the caller owns the transaction."""
    return (
        db.query(MaintenanceRecord)
        .filter(MaintenanceRecord.vehicle_id == vehicle_id)
        .delete(synchronize_session=False)
    )
