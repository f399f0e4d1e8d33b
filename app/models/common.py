from datetime import datetime, UTC
import uuid


def generate_id() -> str:
    """New opaque identifier for a row"""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)
