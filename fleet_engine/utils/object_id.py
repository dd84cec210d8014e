# fleet_engine/utils/object_id.py
from datetime import datetime, timezone
from bson import ObjectId


def new_object_id() -> str:
    """Generate a fresh identifier as a 24 character hex string."""
    return str(ObjectId())


def utc_now() -> datetime:
    return datetime.now(timezone.utc)
