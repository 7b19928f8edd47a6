# garage/services/vehicle_service.py
"""
Vehicle registry: create, list, update, delete, and share vehicles.

Plates are unique across all users. Deleting a vehicle removes its
maintenance records first and then the vehicle, inside one transaction.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from garage.errors import DuplicateKeyError, RecipientNotFoundError, SelfShareError, ValidationError
from garage.models.user import User
from garage.models.vehicle import Vehicle, vehicle_shares
from garage.schemas.vehicle import VehicleCreate, VehicleUpdate
from garage.services import user_service
from garage.services.access_control import AccessMode, load_vehicle_for
from garage.services.maintenance_service import delete_for_vehicle
from garage.utils.logger import get_logger

logger = get_logger(__name__)

DUPLICATE_PLATE_MESSAGE = "A vehicle with this plate already exists"


def lookup_vehicle_by_plate(db: Session, plate: str) -> Optional[Vehicle]:
    """Find a vehicle by its normalized plate. Returns None if not found."""
    return db.query(Vehicle).filter(Vehicle.placa == plate).first()


def _commit_plate_change(db: Session):
    try:
        db.commit()
    except IntegrityError:
        # Another request registered the same plate first
        db.rollback()
        raise DuplicateKeyError(DUPLICATE_PLATE_MESSAGE)


def create_vehicle(db: Session, owner_id: int, data: VehicleCreate) -> Vehicle:
    if lookup_vehicle_by_plate(db, data.placa):
        raise DuplicateKeyError(DUPLICATE_PLATE_MESSAGE)

    now = datetime.utcnow()
    vehicle = Vehicle(**data.model_dump(), owner_id=owner_id, created_at=now, updated_at=now)
    db.add(vehicle)
    _commit_plate_change(db)
    db.refresh(vehicle)

    logger.info(f"[VEHICLE] {vehicle.placa} registered by user {owner_id}")
    return vehicle


def list_visible_to(db: Session, user_id: int) -> list:
    """Vehicles the user owns or that were shared with them, newest first."""
    shared_ids = select(vehicle_shares.c.vehicle_id).where(vehicle_shares.c.user_id == user_id)
    vehicles = (
        db.query(Vehicle)
        .filter(or_(Vehicle.owner_id == user_id, Vehicle.id.in_(shared_ids)))
        .order_by(Vehicle.created_at.desc(), Vehicle.id.desc())
        .all()
    )
    logger.debug(f"[VEHICLE] {len(vehicles)} vehicles visible to user {user_id}")
    return vehicles


def get_vehicle(db: Session, vehicle_id: int, user_id: int) -> Vehicle:
    return load_vehicle_for(db, vehicle_id, user_id, AccessMode.READ)


def update_vehicle(db: Session, vehicle_id: int, user_id: int, data: VehicleUpdate) -> Vehicle:
    vehicle = load_vehicle_for(db, vehicle_id, user_id, AccessMode.UPDATE)
    changes = data.model_dump(exclude_unset=True)
    if not changes:
        return vehicle

    new_plate = changes.get("placa")
    if new_plate and new_plate != vehicle.placa:
        existing = lookup_vehicle_by_plate(db, new_plate)
        if existing is not None and existing.id != vehicle.id:
            raise DuplicateKeyError(DUPLICATE_PLATE_MESSAGE)

    for field, value in changes.items():
        setattr(vehicle, field, value)
    vehicle.updated_at = datetime.utcnow()
    _commit_plate_change(db)
    db.refresh(vehicle)

    logger.info(f"[VEHICLE] {vehicle.id} updated by user {user_id}: {sorted(changes)}")
    return vehicle


def delete_vehicle(db: Session, vehicle_id: int, user_id: int) -> int:
    """Delete a vehicle and its maintenance history. Returns the number of records removed."""
    vehicle = load_vehicle_for(db, vehicle_id, user_id, AccessMode.DELETE)
    try:
        removed = delete_for_vehicle(db, vehicle.id)
        db.delete(vehicle)
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error(f"[VEHICLE] Cascade delete failed for vehicle {vehicle_id}", exc_info=True)
        raise

    logger.info(f"[VEHICLE] {vehicle_id} deleted by user {user_id} ({removed} maintenance records)")
    return removed


def share_vehicle(db: Session, vehicle_id: int, owner_id: int, target_email: str) -> User:
    """Grant a registered user access to the vehicle. Re-sharing is a no-op."""
    vehicle = load_vehicle_for(db, vehicle_id, owner_id, AccessMode.SHARE)
    if not user_service.normalize_email(target_email):
        raise ValidationError("Recipient email is required")

    recipient = user_service.find_by_email(db, target_email)
    if recipient is None:
        raise RecipientNotFoundError()
    if recipient.id == vehicle.owner_id:
        raise SelfShareError()

    if recipient.id in vehicle.shared_user_ids():
        logger.info(f"[SHARE] Vehicle {vehicle.id} already shared with user {recipient.id}")
        return recipient

    vehicle.shared_with.append(recipient)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent share of the same pair already landed
        db.rollback()
        logger.info(f"[SHARE] Vehicle {vehicle.id} shared with user {recipient.id} concurrently")
        return recipient

    logger.info(f"[SHARE] Vehicle {vehicle.id} shared with user {recipient.id} by owner {owner_id}")
    return recipient


def unshare_vehicle(db: Session, vehicle_id: int, owner_id: int, target_user_id: int):
    """Revoke a user's shared access. Revoking someone without access is a no-op."""
    vehicle = load_vehicle_for(db, vehicle_id, owner_id, AccessMode.SHARE)
    remaining = [u for u in vehicle.shared_with if u.id != target_user_id]
    if len(remaining) == len(vehicle.shared_with):
        return
    vehicle.shared_with = remaining
    db.commit()
    logger.info(f"[SHARE] Vehicle {vehicle.id} no longer shared with user {target_user_id}")
