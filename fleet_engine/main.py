# fleet_engine/main.py
import logging
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from fleet_engine.routes import service_job_router, mechanic_router, hub_router, vehicle_router, driver_router, report_router
from fleet_engine.database import db, connect_to_mongo, close_mongo_connection, init_db, load_store, insert_sample_data, sync_store
from fleet_engine.errors import FleetError, create_error_response
from fleet_engine.services import format_validation_errors
from fleet_engine.config import get_settings

settings = get_settings()

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    if settings.MONGODB_URI:
        await connect_to_mongo()
        await init_db()
        await load_store(db.store)
    else:
        logger.warning("MONGODB_URI not set, running with an in-memory store only")
    if settings.LOAD_SAMPLE_DATA:
        insert_sample_data(db.store)
        await sync_store(db.store)
    yield
    # Shutdown
    await close_mongo_connection()

app = FastAPI(title="Fleet Service Engine", lifespan=lifespan)

@app.exception_handler(FleetError)
async def fleet_error_handler(request: Request, exc: FleetError):
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.to_response()})

@app.exception_handler(RequestValidationError)
async def request_validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=400,
        content={"detail": create_error_response(
            message="Invalid request",
            details=format_validation_errors(exc.errors()),
            error="ValidationError",
        )},
    )

app.include_router(service_job_router, prefix=settings.API_PREFIX, tags=["service-jobs"])
app.include_router(mechanic_router, prefix=settings.API_PREFIX, tags=["mechanics"])
app.include_router(hub_router, prefix=settings.API_PREFIX, tags=["hubs"])
app.include_router(vehicle_router, prefix=settings.API_PREFIX, tags=["vehicles"])
app.include_router(driver_router, prefix=settings.API_PREFIX, tags=["drivers"])
app.include_router(report_router, prefix=settings.API_PREFIX, tags=["reports"])

@app.get("/")
async def root():
    return {"message": "Welcome to the Fleet Service Engine"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "fleet_engine.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.RELOAD
    )
