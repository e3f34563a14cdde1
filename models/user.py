import logging
from typing import Optional

from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from typings.user import Role
from util.cert import MAX_SECRET_BYTES, check_password_async, hash_password_async
from util.errors import ConflictError, ValidationError
from utils import format_document, utcnow, validate_object_id

logger = logging.getLogger(__name__)


def format_user(user: dict) -> dict:
    """
    API shape of a stored user; the password digest never leaves the store
    """
    return format_document(user, hidden=("password",))


class CredentialStore:
    """
    User accounts on the ``users`` collection.

    Every write that carries a ``password`` hashes it with bcrypt first,
    so only digests reach storage.
    """

    def __init__(self, collection, rounds: int = 10):
        self.collection = collection
        self.rounds = rounds

    async def hash_secret(self, plain: str) -> str:
        if len(plain.encode("utf-8")) > MAX_SECRET_BYTES:
            raise ValidationError(f"Password must be at most {MAX_SECRET_BYTES} bytes")
        return await hash_password_async(plain, self.rounds)

    async def verify_secret(self, plain: str, digest: str) -> bool:
        return await check_password_async(plain, digest)

    async def find_by_username(self, username: str) -> Optional[dict]:
        return await self.collection.find_one({"username": username})

    async def find_by_id(self, id) -> Optional[dict]:
        _id = validate_object_id(id)
        if _id is None:
            return None
        return await self.collection.find_one({"_id": _id})

    async def list(self, role: Optional[str] = None) -> list[dict]:
        query = {"role": role} if role else {}
        return await self.collection.find(query).sort("username", 1).to_list(None)

    async def create(self, fields: dict) -> dict:
        existing = await self.collection.find_one(
            {"$or": [{"username": fields["username"]}, {"email": fields["email"]}]}
        )
        if existing:
            raise ConflictError("Username or email already in use")

        now = utcnow()
        user = {
            "username": fields["username"],
            "email": fields["email"],
            "name": fields["name"],
            "role": Role(fields.get("role", Role.employee)).value,
            "employeeId": fields.get("employeeId"),
            "password": await self.hash_secret(fields["password"]),
            "createdAt": now,
            "updatedAt": now,
        }
        try:
            result = await self.collection.insert_one(user)
        except DuplicateKeyError:
            raise ConflictError("Username or email already in use")
        user["_id"] = result.inserted_id
        logger.info("Created user %s with role %s", user["username"], user["role"])
        return user

    async def update_fields(self, id, fields: dict) -> Optional[dict]:
        _id = validate_object_id(id)
        if _id is None:
            return None
        changes = dict(fields)
        if "password" in changes:
            changes["password"] = await self.hash_secret(changes["password"])
        changes["updatedAt"] = utcnow()
        return await self.collection.find_one_and_update(
            {"_id": _id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
