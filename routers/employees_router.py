import logging

from ariadne import MutationType, QueryType
from pymongo import ReturnDocument

import settings
from models.employee import format_employee
from typings.employee import EmployeeInput, EmployeePatch
from util.access import require_admin
from util.errors import NotFoundError
from utils import parse_input, utcnow, validate_object_id

logger = logging.getLogger(__name__)

query = QueryType()
mutation = MutationType()


async def add_employee(container, user, fields: dict) -> dict:
    """
    Create an employee (admin only)
    """
    require_admin(user)
    payload = parse_input(EmployeeInput, fields)

    employee = payload.model_dump(by_alias=True, exclude_none=True)
    now = utcnow()
    employee["createdAt"] = now
    employee["updatedAt"] = now

    result = await container.db["employees"].insert_one(employee)
    employee["_id"] = result.inserted_id
    container.cache.invalidate_all()

    logger.info("Employee %s added by %s", result.inserted_id, user["username"])
    return format_employee(employee)


async def update_employee(container, user, id: str, fields: dict) -> dict:
    """
    Apply a partial update to an employee (admin only)
    """
    require_admin(user)
    payload = parse_input(EmployeePatch, fields)

    changes = payload.model_dump(by_alias=True, exclude_unset=True)
    changes["updatedAt"] = utcnow()

    _id = validate_object_id(id)
    employee = None
    if _id is not None:
        employee = await container.db["employees"].find_one_and_update(
            {"_id": _id},
            {"$set": changes},
            return_document=ReturnDocument.AFTER,
        )
    if employee is None:
        raise NotFoundError(f"Employee with ID {id} not found")

    container.cache.invalidate_all()
    return format_employee(employee)


async def delete_employee(container, user, id: str) -> bool:
    """
    Remove an employee (admin only)
    """
    require_admin(user)

    _id = validate_object_id(id)
    employee = None
    if _id is not None:
        employee = await container.db["employees"].find_one_and_delete({"_id": _id})
    if employee is None:
        raise NotFoundError(f"Employee with ID {id} not found")

    container.cache.invalidate_all()
    logger.info("Employee %s deleted by %s", id, user["username"])
    return True


@query.field("employees")
async def resolve_employees(_, info, **args):
    container = info.context["container"]
    return await container.employees.list(
        page=args.get("page") or 1,
        limit=args.get("limit") or settings.DEFAULT_PAGE_LIMIT,
        sort_by=args.get("sortBy") or "name",
        sort_order=args.get("sortOrder") or "asc",
        filter_name=args.get("filterName"),
    )


@query.field("employee")
async def resolve_employee(_, info, id):
    return await info.context["container"].employees.get_by_id(id)


@mutation.field("addEmployee")
async def resolve_add_employee(_, info, **fields):
    return await add_employee(info.context["container"], info.context["user"], fields)


@mutation.field("updateEmployee")
async def resolve_update_employee(_, info, id, **fields):
    return await update_employee(info.context["container"], info.context["user"], id, fields)


@mutation.field("deleteEmployee")
async def resolve_delete_employee(_, info, id):
    return await delete_employee(info.context["container"], info.context["user"], id)
