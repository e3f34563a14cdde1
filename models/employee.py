import logging
import math
import re
from typing import Optional

from pymongo import ASCENDING, DESCENDING

import settings
from util.cache import ResultCache, entity_key, listing_key
from utils import format_document, validate_object_id

logger = logging.getLogger(__name__)

# Fields a client may sort on; anything else falls back to name
SORTABLE_FIELDS = ("name", "age", "class", "attendance", "createdAt", "updatedAt")


def safe_sort_by(sort_by: Optional[str]) -> str:
    return sort_by if sort_by in SORTABLE_FIELDS else "name"


def safe_sort_order(sort_order: Optional[str]) -> str:
    return "desc" if sort_order == "desc" else "asc"


def page_info(page: int, limit: int, total_count: int) -> dict:
    total_pages = math.ceil(total_count / limit)
    return {
        "hasNextPage": page < total_pages,
        "hasPreviousPage": page > 1,
        "totalPages": total_pages,
        "totalCount": total_count,
        "currentPage": page,
    }


def format_employee(employee: dict) -> dict:
    return format_document(employee)


class EmployeeQueryEngine:
    """
    Paginated, sorted and filtered reads over the ``employees`` collection,
    served from the result cache when possible.

    Cache faults are logged and treated as misses. Storage errors propagate.
    """

    def __init__(self, collection, cache: ResultCache, max_limit: int = settings.MAX_PAGE_LIMIT):
        self.collection = collection
        self.cache = cache
        self.max_limit = max_limit

    def _cache_get(self, key: str):
        try:
            return self.cache.get(key)
        except Exception:
            logger.warning("Cache lookup failed for %s", key, exc_info=True)
            return None

    def _cache_set(self, key: str, value) -> None:
        try:
            self.cache.set(key, value)
        except Exception:
            logger.warning("Cache store failed for %s", key, exc_info=True)

    async def list(
        self,
        page: int = 1,
        limit: int = settings.DEFAULT_PAGE_LIMIT,
        sort_by: str = "name",
        sort_order: str = "asc",
        filter_name: Optional[str] = None,
    ) -> dict:
        page = max(page or 1, 1)
        limit = min(max(limit or settings.DEFAULT_PAGE_LIMIT, 1), self.max_limit)
        sort_by = safe_sort_by(sort_by)
        sort_order = safe_sort_order(sort_order)
        filter_name = filter_name or None

        key = listing_key(page, limit, sort_by, sort_order, filter_name)
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug("Cache hit for employees query %s", key)
            return cached
        logger.debug("Cache miss for employees query %s", key)

        query = {}
        if filter_name:
            query["name"] = {"$regex": re.escape(filter_name), "$options": "i"}

        total_count = await self.collection.count_documents(query)
        employees = (
            await self.collection.find(query)
            .sort([
                (sort_by, DESCENDING if sort_order == "desc" else ASCENDING),
                ("_id", ASCENDING),
            ])
            .skip((page - 1) * limit)
            .limit(limit)
            .to_list(limit)
        )

        result = {
            "employees": [format_employee(employee) for employee in employees],
            "pageInfo": page_info(page, limit, total_count),
        }
        self._cache_set(key, result)
        return result

    async def get_by_id(self, id) -> Optional[dict]:
        key = entity_key(str(id))
        cached = self._cache_get(key)
        if cached is not None:
            logger.debug("Cache hit for employee %s", id)
            return cached

        _id = validate_object_id(id)
        if _id is None:
            return None
        employee = await self.collection.find_one({"_id": _id})
        if employee is None:
            logger.info("No employee found with ID: %s", id)
            return None

        result = format_employee(employee)
        self._cache_set(key, result)
        return result
