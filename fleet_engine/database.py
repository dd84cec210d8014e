# fleet_engine/database.py
import asyncio
import logging
from datetime import date, timedelta
from motor.motor_asyncio import AsyncIOMotorClient
from pymongo import ASCENDING
from pymongo.errors import PyMongoError
from fleet_engine.config import get_settings
from fleet_engine.services import fault_ledger, job_lifecycle, registry
from fleet_engine.store import MODELS, FleetStore

logger = logging.getLogger(__name__)

settings = get_settings()

class Database:
    client: AsyncIOMotorClient = None
    db = None
    store: FleetStore = None
    write_lock: asyncio.Lock = None

db = Database()
db.store = FleetStore(job_number_prefix=settings.JOB_NUMBER_PREFIX)

async def connect_to_mongo():
    db.client = AsyncIOMotorClient(settings.MONGODB_URI)
    db.db = db.client[settings.MONGODB_DB_NAME]
    db.write_lock = asyncio.Lock()
    db.store.track_changes = True
    logger.info("Connected to MongoDB: %s", settings.MONGODB_DB_NAME)

async def close_mongo_connection():
    if db.client:
        db.client.close()
        logger.info("Closed MongoDB connection")
    db.client = None
    db.db = None
    db.store.track_changes = False

async def get_store() -> FleetStore:
    return db.store

async def init_db(database=None):
    database = database if database is not None else db.db
    # Collections
    collections = await database.list_collection_names()
    for name in MODELS:
        if name not in collections:
            await database.create_collection(name)

    # Uniqueness the registry relies on
    await database.vehicles.create_index([("plate_number", ASCENDING)], unique=True)
    await database.hubs.create_index([("serial_number", ASCENDING)], unique=True)
    await database.hubs.create_index([("auth_key", ASCENDING)], unique=True)
    await database.drivers.create_index([("email", ASCENDING)], unique=True)
    await database.mechanics.create_index([("email", ASCENDING)], unique=True)
    await database.service_jobs.create_index([("job_number", ASCENDING)], unique=True)

    # Lookup indexes
    await database.service_jobs.create_index([("vehicle_id", ASCENDING)])
    await database.service_jobs.create_index([("status", ASCENDING)])
    await database.vehicle_errors.create_index([("vehicle_id", ASCENDING)])

    logger.info("Database initialized successfully!")
    return True

async def load_store(store: FleetStore, database=None):
    """Fill the store from every collection; documents carry no derived values."""
    database = database if database is not None else db.db
    total = 0
    for name in MODELS:
        documents = [document async for document in database[name].find({})]
        total += store.load(name, documents)
    logger.info("Loaded %d entities from MongoDB", total)
    return total

async def sync_store(store: FleetStore, database=None, lock: asyncio.Lock = None):
    """Write back every entity changed since the last sync.

    Draining and writing happen under one lock, so the last write of an
    entity always carries its newest state. Changes that were not written
    are queued again for the next sync. A MongoDB failure is logged rather
    than raised because the store already holds the committed mutation.
    """
    database = database if database is not None else db.db
    if database is None:
        return 0
    lock = lock or db.write_lock or asyncio.Lock()
    written = 0
    async with lock:
        changes = store.drain_changes()
        try:
            for collection, document in changes:
                await database[collection].replace_one({"_id": document["_id"]}, document, upsert=True)
                written += 1
        except PyMongoError:
            store.requeue_changes(changes[written:])
            logger.exception("Write-back failed, %d changes queued for retry", len(changes) - written)
        except BaseException:
            store.requeue_changes(changes[written:])
            raise
    if written:
        logger.debug("Synced %d changed entities", written)
    return written

def insert_sample_data(store: FleetStore):
    if not store.is_empty():
        logger.info("Sample data already exists. Skipping insertion.")
        return False

    # Sample vehicles
    vehicles = [
        registry.register_vehicle(store, {"plate_number": "KAA-101", "manufacturer": "Toyota", "model": "Hilux", "year": 2022, "current_mileage": 48000, "service_mileage": 50000}),
        registry.register_vehicle(store, {"plate_number": "KAB-202", "manufacturer": "Ford", "model": "Transit", "year": 2021, "current_mileage": 91000, "service_mileage": 90000}),
        registry.register_vehicle(store, {"plate_number": "KAC-303", "manufacturer": "Isuzu", "model": "D-Max", "year": 2023, "current_mileage": 12000, "service_mileage": 20000}),
    ]

    # Sample hubs, one already fitted
    hubs = [
        registry.register_hub(store, {"serial_number": "OBD-0001", "manufacturer": "Freematics", "model_name": "ONE+"}),
        registry.register_hub(store, {"serial_number": "OBD-0002", "manufacturer": "Freematics", "model_name": "ONE+"}),
    ]
    registry.assign_hub(store, hubs[0].id, vehicles[0].id)

    # Sample drivers
    drivers = [
        registry.register_driver(store, {"email": "alice.brown@example.com", "full_name": "Alice Brown"}),
        registry.register_driver(store, {"email": "charlie.davis@example.com", "full_name": "Charlie Davis"}),
        registry.register_driver(store, {"email": "eva.white@example.com", "full_name": "Eva White", "available": False}),
    ]
    registry.assign_driver(store, vehicles[0].id, drivers[0].id)

    # Sample mechanics
    mechanics = [
        registry.register_mechanic(store, {"email": "john.doe@example.com", "full_name": "John Doe"}),
        registry.register_mechanic(store, {"email": "jane.smith@example.com", "full_name": "Jane Smith"}),
    ]

    # A reported fault and the job raised for it
    fault = fault_ledger.record_fault(store, vehicles[1].id, {
        "error_code": "P0301",
        "title": "Cylinder 1 misfire detected",
        "subsystem": "engine",
        "severity": "CRITICAL",
    })
    job_lifecycle.create_job(store, {
        "title": "Misfire diagnosis",
        "description": "Engine misfire reported by hub telemetry",
        "instructions": "Inspect spark plugs and ignition coil on cylinder 1",
        "priority": "HIGH",
        "vehicle_id": vehicles[1].id,
        "vehicle_error_id": fault.id,
        "scheduled_date": date.today() + timedelta(days=1),
        "estimated_cost": 150.0,
        "mechanic_ids": [mechanic.id for mechanic in mechanics],
        "required_parts": [
            {"part_name": "Spark plug", "part_number": "SP-118", "quantity": 4, "unit_price": 12.5},
        ],
    })

    logger.info("Sample data inserted successfully!")
    return True
