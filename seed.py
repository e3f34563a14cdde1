import logging

from tqdm import tqdm

import settings
from database import close_mongo_connection, connect_to_mongo, ensure_indexes
from models.user import CredentialStore
from utils import utcnow

EMPLOYEES = [
    {"name": "John Smith", "age": 35, "class": "Senior Faculty",
     "subjects": ["Mathematics", "Computer Science"], "attendance": 98.5},
    {"name": "Sarah Johnson", "age": 28, "class": "Junior Faculty",
     "subjects": ["English Literature", "Creative Writing"], "attendance": 95.2},
    {"name": "Michael Chen", "age": 42, "class": "Department Head",
     "subjects": ["Physics", "Astronomy"], "attendance": 99.1},
    {"name": "Emily Davis", "age": 31, "class": "Mid-level Faculty",
     "subjects": ["History", "Political Science"], "attendance": 92.8},
    {"name": "Robert Wilson", "age": 45, "class": "Senior Faculty",
     "subjects": ["Chemistry", "Biology"], "attendance": 97.3},
    {"name": "Jennifer Lee", "age": 29, "class": "Junior Faculty",
     "subjects": ["Psychology", "Sociology"], "attendance": 94.6},
    {"name": "David Martinez", "age": 39, "class": "Mid-level Faculty",
     "subjects": ["Economics", "Business Studies"], "attendance": 91.5},
    {"name": "Lisa Thompson", "age": 33, "class": "Mid-level Faculty",
     "subjects": ["Art History", "Studio Art"], "attendance": 89.9},
    {"name": "James Wilson", "age": 47, "class": "Department Head",
     "subjects": ["Music Theory", "Composition"], "attendance": 96.7},
    {"name": "Patricia Rodriguez", "age": 36, "class": "Senior Faculty",
     "subjects": ["Spanish", "French"], "attendance": 93.2},
]


async def seed(database):
    """
    Replace the directory contents with the sample employees and accounts
    """
    await database["employees"].delete_many({})
    await database["users"].delete_many({})
    await ensure_indexes(database)

    employee_ids = []
    for employee in tqdm(EMPLOYEES, desc="employees"):
        now = utcnow()
        result = await database["employees"].insert_one(
            {**employee, "createdAt": now, "updatedAt": now}
        )
        employee_ids.append(result.inserted_id)

    users = CredentialStore(database["users"], rounds=settings.BCRYPT_ROUNDS)
    await users.create({
        "username": settings.SEED_ADMIN_USERNAME,
        "password": settings.SEED_ADMIN_PASSWORD,
        "email": settings.SEED_ADMIN_EMAIL,
        "name": "Admin User",
        "role": "ADMIN",
    })
    await users.create({
        "username": settings.SEED_EMPLOYEE_USERNAME,
        "password": settings.SEED_EMPLOYEE_PASSWORD,
        "email": "john@graphstaff.local",
        "name": "John Smith",
        "role": "EMPLOYEE",
        "employeeId": employee_ids[0],
    })
    return employee_ids


async def main():
    database = await connect_to_mongo()
    try:
        employee_ids = await seed(database)
        logging.info("%d employees inserted", len(employee_ids))
        logging.info(
            "Users created: %s (admin), %s (employee)",
            settings.SEED_ADMIN_USERNAME,
            settings.SEED_EMPLOYEE_USERNAME,
        )
    finally:
        await close_mongo_connection()


if __name__ == "__main__":
    import asyncio

    logging.basicConfig(level=settings.LOG_LEVEL)
    asyncio.run(main())
