# fleet_engine/schemas/__init__.py
from .vehicle import VehicleCreate, VehicleOut
from .hub import HubCreate, HubAssign, HubOut, HubCreatedOut
from .driver import DriverCreate, DriverAvailability, DriverOut
from .mechanic import MechanicCreate, MechanicOut
from .vehicle_error import VehicleErrorCreate, VehicleErrorOut
from .service_job import (
    RequiredPartIn,
    ServiceJobCreate,
    ServiceJobUpdate,
    MechanicAssign,
    AssignmentDecision,
    WorkflowUpdate,
    JobCompletion,
    MechanicAssignmentOut,
    RequiredPartOut,
    ServiceJobOut,
)
from .summary import ServiceJobSummary, VehicleFaultSummary
