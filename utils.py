from datetime import datetime, timezone
from typing import Optional, Type, TypeVar

from bson import ObjectId
from bson.errors import InvalidId
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from util.errors import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def validate_object_id(id) -> Optional[ObjectId]:
    """
    ObjectId for id, or None when id is not a valid ObjectId
    """
    if isinstance(id, ObjectId):
        return id
    if id is None:
        return None
    try:
        return ObjectId(id)
    except (InvalidId, TypeError):
        return None


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    Extract the token from an ``Authorization: Bearer <token>`` header
    """
    if not authorization or not authorization.startswith("Bearer "):
        return None
    token = authorization[len("Bearer "):].strip()
    return token or None


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _serialize(value):
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, datetime):
        if value.tzinfo is None:
            # pymongo hands back naive UTC datetimes
            value = value.replace(tzinfo=timezone.utc)
        return value.isoformat()
    return value


def format_document(document: dict, hidden: tuple = ()) -> dict:
    """
    Turn a stored document into its API shape: ``_id`` becomes a string
    ``id``, ObjectId and datetime values become strings, hidden keys are dropped.
    """
    result = {"id": str(document["_id"])}
    for key, value in document.items():
        if key == "_id" or key in hidden:
            continue
        result[key] = _serialize(value)
    return result


def parse_input(model: Type[ModelT], data: dict) -> ModelT:
    """
    Validate data against model, reporting failures as ValidationError
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        problems = []
        for error in exc.errors():
            location = ".".join(str(part) for part in error["loc"])
            problems.append(f"{location}: {error['msg']}" if location else error["msg"])
        raise ValidationError("Invalid input: " + "; ".join(problems))
