import logging

import settings
from database import close_mongo_connection, connect_to_mongo
from models.employee import format_employee


async def inspect(database) -> dict:
    """
    Employee count plus one stored and formatted sample
    """
    count = await database["employees"].count_documents({})
    sample = await database["employees"].find_one() if count else None
    return {
        "count": count,
        "sample": sample,
        "formatted": format_employee(sample) if sample else None,
    }


async def main():
    database = await connect_to_mongo()
    try:
        report = await inspect(database)
        print(f"Found {report['count']} employees in the database")
        if report["sample"] is None:
            print("No employees found. Database might be empty.")
        else:
            print("Sample employee document:", report["sample"])
            print("Formatted for GraphQL:", report["formatted"])
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    import asyncio

    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(main())
