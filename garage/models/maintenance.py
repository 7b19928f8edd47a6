# garage/models/maintenance.py
"""
Maintenance records table: service history for a vehicle.
Records are never edited; they are removed one by one or together with their vehicle.
"""

from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Text
from garage.database import Base


class MaintenanceRecord(Base):
    __tablename__ = "maintenance_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    descricao_servico = Column(Text, nullable=False)
    data = Column(DateTime, nullable=False, index=True)
    custo = Column(Float, nullable=False)
    quilometragem = Column(Float)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    created_at = Column(DateTime, nullable=False)

    def __repr__(self):
        return f"<MaintenanceRecord {self.id} vehicle={self.vehicle_id} custo={self.custo}>"
