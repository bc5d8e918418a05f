"""Helpers for turning store documents into JSON-ready values"""

from typing import Any, Dict, Iterable, List, Optional

from bson import ObjectId
from fastapi.encoders import jsonable_encoder


def serialize_document(document: Dict[str, Any]) -> Dict[str, Any]:
    """Render a document as JSON-compatible data, ObjectIds become hex strings"""
    return jsonable_encoder(document, custom_encoder={ObjectId: str})


def serialize_documents(documents: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [serialize_document(document) for document in documents]


def to_object_id(value: Any) -> Optional[ObjectId]:
    """Parse an identifier into an ObjectId, None when it is not a valid one"""
    if isinstance(value, ObjectId):
        return value
    if isinstance(value, str) and ObjectId.is_valid(value):
        return ObjectId(value)
    return None
