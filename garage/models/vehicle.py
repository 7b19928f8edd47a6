# garage/models/vehicle.py
"""
Vehicles table plus the vehicle_shares association table.
Each vehicle has exactly one owner; shared_with holds the users the owner
delegated access to. The composite primary key on vehicle_shares gives the
share list set semantics.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Table
from sqlalchemy.orm import relationship
from garage.database import Base

PLATE_MAX_LENGTH = 20
NAME_MAX_LENGTH = 100
COLOR_MAX_LENGTH = 50

vehicle_shares = Table(
    "vehicle_shares",
    Base.metadata,
    Column("vehicle_id", Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, autoincrement=True)
    placa = Column(String(PLATE_MAX_LENGTH), unique=True, nullable=False, index=True)
    marca = Column(String(NAME_MAX_LENGTH), nullable=False)
    modelo = Column(String(NAME_MAX_LENGTH), nullable=False)
    ano = Column(Integer, nullable=False)
    cor = Column(String(COLOR_MAX_LENGTH))
    tipo = Column(String(20), nullable=False, default="Carro")   # Carro | Moto | Caminhao
    owner_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)
    updated_at = Column(DateTime, nullable=False)

    owner = relationship("User", lazy="joined")
    shared_with = relationship("User", secondary=vehicle_shares, lazy="selectin")

    def shared_user_ids(self) -> set:
        return {u.id for u in self.shared_with}

    def __repr__(self):
        return f"<Vehicle {self.placa} owner={self.owner_id}>"
