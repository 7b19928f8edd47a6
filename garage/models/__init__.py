# Garage API database models
# Import all models here for SQLAlchemy discovery

from garage.models.user import User                               # noqa
from garage.models.vehicle import Vehicle, vehicle_shares          # noqa
from garage.models.maintenance import MaintenanceRecord           # noqa
