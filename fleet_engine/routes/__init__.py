#fleet_engine/routes/__init__.py

from .service_job import router as service_job_router
from .mechanic import router as mechanic_router
from .hub import router as hub_router
from .vehicle import router as vehicle_router
from .driver import router as driver_router
from .report import router as report_router
