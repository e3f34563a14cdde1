import logging
from typing import Optional

from ariadne import MutationType, ObjectType, QueryType

from models.user import format_user
from typings.user import RegisterInput, Role
from util.access import require_admin, require_authenticated
from util.errors import AuthenticationError, AuthorizationError, NotFoundError
from utils import parse_input, validate_object_id

logger = logging.getLogger(__name__)

query = QueryType()
mutation = MutationType()
user_type = ObjectType("User")

LOGIN_FAILED = "Invalid username or password"


async def login(container, username: str, password: str) -> dict:
    """
    Exchange a username and password for a bearer token.
    Unknown user and wrong password fail with the same error.
    """
    user = await container.users.find_by_username(username)
    if user is None:
        raise AuthenticationError(LOGIN_FAILED)
    if not await container.users.verify_secret(password, user["password"]):
        raise AuthenticationError(LOGIN_FAILED)

    return {
        "token": container.tokens.issue(str(user["_id"])),
        "user": format_user(user),
    }


async def register(container, caller: Optional[dict], fields: dict) -> dict:
    """
    Create an account and log it in. Only admins may create admin accounts.
    """
    payload = parse_input(RegisterInput, fields)

    if payload.role == Role.admin:
        if caller is None or caller.get("role") != Role.admin:
            raise AuthorizationError("Only admins can create admin accounts")

    user = await container.users.create(
        {
            "username": payload.username,
            "password": payload.password,
            "email": payload.email,
            "name": payload.name,
            "role": payload.role.value,
        }
    )
    return {
        "token": container.tokens.issue(str(user["_id"])),
        "user": format_user(user),
    }


async def list_users(container, caller: Optional[dict], role: Optional[str] = None) -> list[dict]:
    require_admin(caller)
    users = await container.users.list(role)
    return [format_user(user) for user in users]


async def assign_employee_to_user(container, caller: Optional[dict], user_id: str, employee_id: str) -> dict:
    require_admin(caller)

    if await container.users.find_by_id(user_id) is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    employee_oid = validate_object_id(employee_id)
    if employee_oid is None or await container.db["employees"].find_one({"_id": employee_oid}) is None:
        raise NotFoundError(f"Employee with ID {employee_id} not found")

    user = await container.users.update_fields(user_id, {"employeeId": employee_oid})
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    return format_user(user)


async def update_user_role(container, caller: Optional[dict], user_id: str, role: str) -> dict:
    require_admin(caller)

    user = await container.users.update_fields(user_id, {"role": Role(role).value})
    if user is None:
        raise NotFoundError(f"User with ID {user_id} not found")
    logger.info("User %s is now %s", user_id, user["role"])
    return format_user(user)


@query.field("me")
async def resolve_me(_, info):
    return format_user(require_authenticated(info.context["user"]))


@query.field("users")
async def resolve_users(_, info, role=None):
    return await list_users(info.context["container"], info.context["user"], role)


@mutation.field("login")
async def resolve_login(_, info, username, password):
    return await login(info.context["container"], username, password)


@mutation.field("register")
async def resolve_register(_, info, **fields):
    fields = {key: value for key, value in fields.items() if value is not None}
    return await register(info.context["container"], info.context["user"], fields)


@mutation.field("assignEmployeeToUser")
async def resolve_assign_employee_to_user(_, info, userId, employeeId):
    return await assign_employee_to_user(
        info.context["container"], info.context["user"], userId, employeeId
    )


@mutation.field("updateUserRole")
async def resolve_update_user_role(_, info, userId, role):
    return await update_user_role(info.context["container"], info.context["user"], userId, role)


@user_type.field("employee")
async def resolve_user_employee(user, info):
    if not user.get("employeeId"):
        return None
    return await info.context["container"].employees.get_by_id(user["employeeId"])
