from carbitrage.infra.db.models.base import Base
from carbitrage.infra.db.models.vehicle import VehicleRow

__all__ = ["Base", "VehicleRow"]
