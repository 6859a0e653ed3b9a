"""
Utility helper functions
"""
from datetime import datetime, timezone
from typing import Optional
import uuid
import re


def generate_uuid() -> str:
    """Generate UUID v4"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    """Naive UTC timestamp, matching the TIMESTAMP columns"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def sanitize_filename(filename: str) -> str:
    """Replace every character outside [A-Za-z0-9.] with an underscore"""
    return re.sub(r"[^a-zA-Z0-9.]", "_", filename or "")


def epoch_millis(moment: Optional[datetime] = None) -> int:
    moment = moment or datetime.now(timezone.utc)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return int(moment.timestamp() * 1000)
