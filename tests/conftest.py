import pytest
import pytest_asyncio
from mongomock_motor import AsyncMongoMockClient

from container import Container
from util.cache import ResultCache

TEST_SECRET = "test-secret"


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class CountingCollection:
    """
    Wraps a collection and counts every storage operation looked up on it
    """

    def __init__(self, collection):
        self._collection = collection
        self.calls = []

    def __getattr__(self, name):
        self.calls.append(name)
        return getattr(self._collection, name)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def database():
    return AsyncMongoMockClient()["graphstaff_test"]


@pytest.fixture
def container(database, clock):
    return Container(
        database,
        secret=TEST_SECRET,
        cache=ResultCache(ttl_seconds=60, clock=clock),
        bcrypt_rounds=4,
    )


@pytest_asyncio.fixture
async def admin(container):
    return await container.users.create({
        "username": "admin",
        "password": "admin123",
        "email": "admin@example.com",
        "name": "Admin User",
        "role": "ADMIN",
    })


@pytest_asyncio.fixture
async def employee_user(container):
    return await container.users.create({
        "username": "john",
        "password": "employee123",
        "email": "john@example.com",
        "name": "John Smith",
    })


async def insert_employees(database, employees):
    result = await database["employees"].insert_many([dict(e) for e in employees])
    return [str(_id) for _id in result.inserted_ids]


@pytest.fixture
def add_employees(database):
    async def _add(*employees):
        return await insert_employees(database, employees)

    return _add
