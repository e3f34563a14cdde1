"""End-to-end tests through the GraphQL schema and the HTTP app."""

import pytest
from ariadne import graphql
from fastapi.testclient import TestClient

import main
import settings
from main import create_app
from schema import schema
from util.errors import format_error
from util.middleware import MIDDLEWARE
from util.rate_limit import RateLimiter

EMPLOYEES_QUERY = """
query Employees($page: Int, $limit: Int, $sortBy: String, $sortOrder: String, $filterName: String) {
  employees(page: $page, limit: $limit, sortBy: $sortBy, sortOrder: $sortOrder, filterName: $filterName) {
    employees { id name age class subjects attendance createdAt }
    pageInfo { hasNextPage hasPreviousPage totalPages totalCount currentPage }
  }
}
"""

ADD_EMPLOYEE = """
mutation Add($name: String!, $age: Int, $attendance: Float, $subjects: [String!]) {
  addEmployee(name: $name, age: $age, attendance: $attendance, subjects: $subjects) { id name age attendance subjects }
}
"""

REGISTER = """
mutation Register($username: String!, $password: String!, $email: String!, $name: String!, $role: Role) {
  register(username: $username, password: $password, email: $email, name: $name, role: $role) {
    token
    user { id username role }
  }
}
"""

LOGIN = """
mutation Login($username: String!, $password: String!) {
  login(username: $username, password: $password) { token user { username role } }
}
"""


async def run(container, query, variables=None, user=None):
    success, result = await graphql(
        schema,
        {"query": query, "variables": variables or {}},
        context_value={"request": None, "container": container, "user": user},
        error_formatter=format_error,
        middleware=MIDDLEWARE,
    )
    return result


def error_codes(result):
    return [error["extensions"]["code"] for error in result.get("errors", [])]


@pytest.mark.asyncio
async def test_scenario_register_then_duplicate(container):
    variables = {"username": "alice", "password": "secret1", "email": "a@x.com", "name": "Alice"}

    first = await run(container, REGISTER, variables)
    second = await run(container, REGISTER, variables)

    assert "errors" not in first
    assert first["data"]["register"]["user"]["role"] == "EMPLOYEE"
    assert first["data"]["register"]["token"]
    assert error_codes(second) == ["CONFLICT"]


@pytest.mark.asyncio
async def test_scenario_admin_adds_employee(container, admin):
    await run(container, EMPLOYEES_QUERY, {"page": 1, "limit": 10})

    added = await run(
        container, ADD_EMPLOYEE,
        {"name": "Bob", "age": 30, "attendance": 92.0, "subjects": ["Math"]},
        user=admin,
    )
    listed = await run(container, EMPLOYEES_QUERY, {"page": 1, "limit": 10})

    assert added["data"]["addEmployee"]["name"] == "Bob"
    names = [e["name"] for e in listed["data"]["employees"]["employees"]]
    assert "Bob" in names
    assert listed["data"]["employees"]["pageInfo"]["totalCount"] == 1


@pytest.mark.asyncio
async def test_scenario_login_failures_match(container, admin):
    wrong_password = await run(container, LOGIN, {"username": "admin", "password": "wrong"})
    unknown_user = await run(container, LOGIN, {"username": "nosuchuser", "password": "x"})

    assert error_codes(wrong_password) == ["UNAUTHENTICATED"]
    assert wrong_password["errors"][0]["message"] == unknown_user["errors"][0]["message"]


@pytest.mark.asyncio
async def test_login_returns_user(container, admin):
    result = await run(container, LOGIN, {"username": "admin", "password": "admin123"})
    assert result["data"]["login"]["user"] == {"username": "admin", "role": "ADMIN"}


@pytest.mark.asyncio
async def test_add_employee_role_gating(container, employee_user):
    as_employee = await run(container, ADD_EMPLOYEE, {"name": "Bob"}, user=employee_user)
    anonymous = await run(container, ADD_EMPLOYEE, {"name": "Bob"})

    assert error_codes(as_employee) == ["FORBIDDEN"]
    assert error_codes(anonymous) == ["UNAUTHENTICATED"]
    assert await container.db["employees"].count_documents({}) == 0


@pytest.mark.asyncio
async def test_add_employee_out_of_range_attendance(container, admin):
    result = await run(container, ADD_EMPLOYEE, {"name": "Bob", "attendance": 150.0}, user=admin)
    assert error_codes(result) == ["BAD_USER_INPUT"]


@pytest.mark.asyncio
async def test_register_overlong_password_is_bad_input(container):
    variables = {"username": "alice", "password": "p" * 80, "email": "a@x.com", "name": "Alice"}

    result = await run(container, REGISTER, variables)

    assert error_codes(result) == ["BAD_USER_INPUT"]
    assert "72 bytes" in result["errors"][0]["message"]


@pytest.mark.asyncio
async def test_employees_query_is_public(container, add_employees):
    await add_employees({"name": "Carol", "class": "Senior Faculty"}, {"name": "Bob"})

    result = await run(container, EMPLOYEES_QUERY, {"sortBy": "__proto__", "limit": 1})

    page = result["data"]["employees"]
    assert [e["name"] for e in page["employees"]] == ["Bob"]
    assert page["pageInfo"]["totalPages"] == 2
    assert page["pageInfo"]["hasNextPage"] is True


@pytest.mark.asyncio
async def test_employee_query_by_id(container, add_employees):
    [carol_id] = await add_employees({"name": "Carol", "class": "Senior Faculty"})

    found = await run(container, "query($id: ID!) { employee(id: $id) { id name class } }", {"id": carol_id})
    missing = await run(container, 'query { employee(id: "nope") { id } }')

    assert found["data"]["employee"] == {"id": carol_id, "name": "Carol", "class": "Senior Faculty"}
    assert missing["data"]["employee"] is None
    assert "errors" not in missing


@pytest.mark.asyncio
async def test_me_requires_authentication(container, employee_user):
    anonymous = await run(container, "{ me { username } }")
    signed_in = await run(container, "{ me { username role } }", user=employee_user)

    assert anonymous["data"]["me"] is None
    assert error_codes(anonymous) == ["UNAUTHENTICATED"]
    assert signed_in["data"]["me"] == {"username": "john", "role": "EMPLOYEE"}


@pytest.mark.asyncio
async def test_users_query_admin_only(container, admin, employee_user):
    as_admin = await run(container, "{ users(role: EMPLOYEE) { username } }", user=admin)
    as_employee = await run(container, "{ users { username } }", user=employee_user)

    assert as_admin["data"]["users"] == [{"username": "john"}]
    assert error_codes(as_employee) == ["FORBIDDEN"]


@pytest.mark.asyncio
async def test_user_employee_link(container, admin, employee_user, add_employees):
    [john_id] = await add_employees({"name": "John Smith"})
    mutation = """
    mutation($userId: ID!, $employeeId: ID!) {
      assignEmployeeToUser(userId: $userId, employeeId: $employeeId) {
        employeeId
        employee { name }
      }
    }
    """

    result = await run(
        container, mutation,
        {"userId": str(employee_user["_id"]), "employeeId": john_id},
        user=admin,
    )

    assert result["data"]["assignEmployeeToUser"] == {
        "employeeId": john_id,
        "employee": {"name": "John Smith"},
    }


@pytest.mark.asyncio
async def test_register_admin_needs_admin(container, admin):
    variables = {"username": "boss", "password": "pw", "email": "b@x.com", "name": "Boss", "role": "ADMIN"}

    anonymous = await run(container, REGISTER, variables)
    by_admin = await run(container, REGISTER, variables, user=admin)

    assert error_codes(anonymous) == ["FORBIDDEN"]
    assert by_admin["data"]["register"]["user"]["role"] == "ADMIN"


@pytest.mark.asyncio
async def test_internal_errors_are_hidden(container, monkeypatch):
    async def explode(*args, **kwargs):
        raise RuntimeError("connection reset by mongo at 10.0.0.5")

    monkeypatch.setattr(container.employees, "list", explode)

    result = await run(container, EMPLOYEES_QUERY)

    assert result["errors"][0]["message"] == "Internal server error"
    assert error_codes(result) == ["INTERNAL_SERVER_ERROR"]


@pytest.mark.asyncio
async def test_rate_limit(container):
    container.rate_limiter = RateLimiter(limit=2, window_seconds=60)

    results = [await run(container, EMPLOYEES_QUERY) for _ in range(3)]

    assert "errors" not in results[0]
    assert "errors" not in results[1]
    assert error_codes(results[2]) == ["RATE_LIMITED"]


class TestHttp:
    @pytest.fixture
    def client(self, container):
        app = create_app()
        app.state.container = container
        return TestClient(app)

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_index(self, client):
        response = client.get("/")
        assert "/graphql/" in response.text

    def test_bearer_token_authenticates(self, client, container):
        register = client.post(
            "/graphql/",
            json={
                "query": REGISTER,
                "variables": {"username": "alice", "password": "secret1", "email": "a@x.com", "name": "Alice"},
            },
        )
        token = register.json()["data"]["register"]["token"]

        me = client.post(
            "/graphql/",
            json={"query": "{ me { username } }"},
            headers={"Authorization": f"Bearer {token}"},
        )
        anonymous = client.post("/graphql/", json={"query": "{ me { username } }"})

        assert me.json()["data"]["me"] == {"username": "alice"}
        assert anonymous.json()["data"]["me"] is None

    def test_invalid_token_is_anonymous(self, client):
        response = client.post(
            "/graphql/",
            json={"query": "{ employees { pageInfo { totalCount } } }"},
            headers={"Authorization": "Bearer not-a-token"},
        )
        assert response.json()["data"]["employees"]["pageInfo"]["totalCount"] == 0


def test_lifespan_builds_and_closes_container(database, monkeypatch):
    closed = []

    async def fake_connect():
        return database

    async def fake_close():
        closed.append(True)

    monkeypatch.setattr(main, "connect_to_mongo", fake_connect)
    monkeypatch.setattr(main, "close_mongo_connection", fake_close)
    monkeypatch.setattr(settings, "JWT_SECRET", "lifespan-secret")

    app = create_app()
    with TestClient(app) as client:
        container = app.state.container
        response = client.post("/graphql/", json={"query": "{ employees { pageInfo { totalCount } } }"})
        assert response.json()["data"]["employees"]["pageInfo"]["totalCount"] == 0
        container.cache.set("key", "value")

    assert closed == [True]
    assert len(container.cache) == 0
