import uuid
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel


def generate_id() -> str:
    """Generate a document ID (UUID4 string)."""
    return str(uuid.uuid4())


def to_document(model: BaseModel) -> dict:
    """Dump a model for insertion into MongoDB (``_id`` key, enums as values)."""
    document = model.model_dump(by_alias=True)
    return {
        key: value.value if isinstance(value, Enum) else value
        for key, value in document.items()
    }


def get_current_timestamp() -> datetime:
    """Get current UTC timestamp."""
    return datetime.now(timezone.utc)


def format_currency(cents: int) -> str:
    """Render an amount in cents as a USD string, e.g. 1299 -> '$12.99'."""
    sign = "-" if cents < 0 else ""
    return f"{sign}${abs(cents) / 100:,.2f}"
