# garage/services/access_control.py
"""
Access gate for vehicles and everything scoped to them.

Owners may do anything. Shared viewers may read a vehicle and add or remove
its maintenance records, but never edit, share, or delete the vehicle itself.
Everyone else is treated as if the vehicle did not exist.
"""

from enum import Enum

from sqlalchemy.orm import Session

from garage.errors import NotFoundError, ForbiddenError
from garage.models.vehicle import Vehicle


class AccessMode(str, Enum):
    READ = "read"
    WRITE = "write"      # maintenance records
    UPDATE = "update"    # vehicle attributes
    SHARE = "share"
    DELETE = "delete"


SHARED_VIEWER_MODES = {AccessMode.READ, AccessMode.WRITE}

_FORBIDDEN_MESSAGES = {
    AccessMode.UPDATE: "Only the owner can edit this vehicle",
    AccessMode.SHARE: "Only the owner can share this vehicle",
    AccessMode.DELETE: "Only the owner can delete this vehicle",
}


def can_access(vehicle: Vehicle, user_id: int, mode: AccessMode) -> bool:
    if vehicle.owner_id == user_id:
        return True
    if mode in SHARED_VIEWER_MODES:
        return user_id in vehicle.shared_user_ids()
    return False


def authorize(vehicle: Vehicle, user_id: int, mode: AccessMode):
    """Raise unless `user_id` may perform `mode` on `vehicle`."""
    if can_access(vehicle, user_id, mode):
        return
    if not can_access(vehicle, user_id, AccessMode.READ):
        raise NotFoundError("Vehicle not found")
    raise ForbiddenError(_FORBIDDEN_MESSAGES.get(mode))


def load_vehicle_for(db: Session, vehicle_id: int, user_id: int, mode: AccessMode) -> Vehicle:
    """Fetch a vehicle and check the caller's rights before handing it out."""
    vehicle = db.query(Vehicle).filter(Vehicle.id == vehicle_id).first()
    if vehicle is None:
        raise NotFoundError("Vehicle not found")
    authorize(vehicle, user_id, mode)
    return vehicle
