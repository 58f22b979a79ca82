from typing import Any, Optional

from bson import ObjectId
from bson.errors import InvalidId

from core.exceptions import bad_request_exception


def to_object_id(value: Optional[str], label: str = "id") -> ObjectId:
    """Convertit un identifiant d'URL en ObjectId, 400 si mal formé."""
    if not value:
        raise bad_request_exception(f"Invalid {label}")
    try:
        return ObjectId(value)
    except (InvalidId, TypeError):
        raise bad_request_exception(f"Invalid {label}")


def serialize_doc(doc: Optional[dict]) -> Optional[dict]:
    """Document MongoDB → dict JSON-compatible (_id en chaîne)."""
    if doc is None:
        return None
    out: dict[str, Any] = {}
    for key, value in doc.items():
        out[key] = str(value) if isinstance(value, ObjectId) else value
    return out


def serialize_docs(docs: list[dict]) -> list[dict]:
    return [serialize_doc(d) for d in docs]
