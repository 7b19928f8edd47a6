# garage/routers/vehicles.py
"""Vehicle CRUD and sharing. Every route requires a valid session token."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from garage.database import get_db
from garage.schemas.auth import MessageOut
from garage.schemas.vehicle import VehicleCreate, VehicleUpdate, VehicleOut, ShareRequest
from garage.security import SessionPrincipal, get_current_user
from garage.services import vehicle_service

router = APIRouter()


@router.post("/veiculos", status_code=status.HTTP_201_CREATED, response_model=VehicleOut,
             summary="Register a vehicle owned by the caller")
def create_vehicle(body: VehicleCreate, db: Session = Depends(get_db),
                   current_user: SessionPrincipal = Depends(get_current_user)):
    vehicle = vehicle_service.create_vehicle(db, current_user.id, body)
    return VehicleOut.for_viewer(vehicle, current_user.id)


@router.get("/veiculos", response_model=list[VehicleOut], summary="Owned and shared vehicles")
def list_vehicles(db: Session = Depends(get_db),
                  current_user: SessionPrincipal = Depends(get_current_user)):
    """Vehicles shared with the caller carry the owner's id and email."""
    vehicles = vehicle_service.list_visible_to(db, current_user.id)
    return [VehicleOut.for_viewer(v, current_user.id) for v in vehicles]


@router.get("/veiculos/{vehicle_id}", response_model=VehicleOut, summary="Get one vehicle")
def get_vehicle(vehicle_id: int, db: Session = Depends(get_db),
                current_user: SessionPrincipal = Depends(get_current_user)):
    vehicle = vehicle_service.get_vehicle(db, vehicle_id, current_user.id)
    return VehicleOut.for_viewer(vehicle, current_user.id)


@router.put("/veiculos/{vehicle_id}", response_model=VehicleOut, summary="Update a vehicle (owner only)")
def update_vehicle(vehicle_id: int, body: VehicleUpdate, db: Session = Depends(get_db),
                   current_user: SessionPrincipal = Depends(get_current_user)):
    vehicle = vehicle_service.update_vehicle(db, vehicle_id, current_user.id, body)
    return VehicleOut.for_viewer(vehicle, current_user.id)


@router.delete("/veiculos/{vehicle_id}", response_model=MessageOut,
               summary="Delete a vehicle and its maintenance history (owner only)")
def delete_vehicle(vehicle_id: int, db: Session = Depends(get_db),
                   current_user: SessionPrincipal = Depends(get_current_user)):
    vehicle_service.delete_vehicle(db, vehicle_id, current_user.id)
    return MessageOut(message="Vehicle removed successfully")


@router.post("/veiculos/{vehicle_id}/share", response_model=MessageOut,
             summary="Share a vehicle with another user (owner only)")
def share_vehicle(vehicle_id: int, body: ShareRequest, db: Session = Depends(get_db),
                  current_user: SessionPrincipal = Depends(get_current_user)):
    recipient = vehicle_service.share_vehicle(db, vehicle_id, current_user.id, body.email)
    return MessageOut(message=f"Vehicle shared with {recipient.email}")


@router.delete("/veiculos/{vehicle_id}/share/{user_id}", response_model=MessageOut,
               summary="Revoke a user's shared access (owner only)")
def unshare_vehicle(vehicle_id: int, user_id: int, db: Session = Depends(get_db),
                    current_user: SessionPrincipal = Depends(get_current_user)):
    vehicle_service.unshare_vehicle(db, vehicle_id, current_user.id, user_id)
    return MessageOut(message="Sharing revoked")
