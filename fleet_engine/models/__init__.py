# fleet_engine/models/__init__.py
from .vehicle import VehicleModel, VehicleStatus
from .hub import HubModel
from .driver import DriverModel
from .mechanic import MechanicModel
from .vehicle_error import VehicleErrorModel, ErrorSeverity, ErrorStatus
from .service_job import (
    ServiceJobModel,
    MechanicAssignmentModel,
    RequiredPartModel,
    JobStatus,
    JobPriority,
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
)
