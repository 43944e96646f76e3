"""
Shared fixtures.

The row store is replaced by an in-memory PostgREST imitation mounted
through ``httpx.MockTransport``, so requests travel through the real
RowStore client code.
"""
from collections import defaultdict
from datetime import datetime, timezone
from fnmatch import fnmatchcase
import json

import httpx
import pytest
from fastapi.testclient import TestClient

from drkleen.config import Settings, get_settings
from drkleen.database import RowStore, get_store
from drkleen.main import app
from drkleen.models.admin import STATE_FLAGS, AccountState
from drkleen.utils.jwt_handler import TokenService
from drkleen.utils.password import hash_password

STRONG_PASSWORD = "Str0ng!Pass"
RESERVED_PARAMS = {"select", "order", "limit", "offset"}


def _text(value):
    if isinstance(value, bool):
        return str(value).lower()
    if value is None:
        return "null"
    return str(value)


def _matches(value, op, arg):
    if op == "eq":
        return _text(value) == arg
    if op == "ilike":
        return value is not None and fnmatchcase(str(value).lower(), arg.lower())
    if value is None:
        return False
    if op == "gte":
        return float(value) >= float(arg)
    if op == "lte":
        return float(value) <= float(arg)
    if op == "gt":
        return float(value) > float(arg)
    if op == "lt":
        return float(value) < float(arg)
    raise AssertionError(f"unsupported filter operator {op}")


class FakeRestStore:
    """Just enough of PostgREST for the queries this service sends."""

    unique = {"admin_users": ("email",)}

    def __init__(self):
        self.tables = defaultdict(list)
        self.next_id = defaultdict(int)
        self.failing = set()
        self.requests = []

    # ---- direct access for tests ----

    def seed(self, table, **row):
        now = datetime.now(timezone.utc).isoformat()
        self.next_id[table] += 1
        stored = {"id": self.next_id[table], "created_at": now, "updated_at": now}
        stored.update(row)
        self.tables[table].append(stored)
        return stored

    def rows(self, table):
        return self.tables[table]

    def get(self, table, row_id):
        for row in self.tables[table]:
            if row["id"] == row_id:
                return row
        return None

    # ---- request handling ----

    def _conditions(self, params):
        conditions = []
        for key, value in params:
            if key in RESERVED_PARAMS:
                continue
            if key == "and":
                for part in value.strip("()").split(","):
                    column, op, arg = part.split(".", 2)
                    conditions.append((column, op, arg))
                continue
            op, _, arg = value.partition(".")
            conditions.append((key, op, arg))
        return conditions

    def _filter(self, table, params):
        conditions = self._conditions(params)
        return [
            row for row in self.tables[table]
            if all(_matches(row.get(col), op, arg) for col, op, arg in conditions)
        ]

    def _conflicts(self, table, row):
        for column in self.unique.get(table, ()):
            if any(existing.get(column) == row.get(column) for existing in self.tables[table]):
                return True
        return False

    def _insert(self, table, values):
        if self._conflicts(table, values):
            return None
        return self.seed(table, **values)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/rest/v1")
        params = request.url.params.multi_items()
        body = json.loads(request.content) if request.content else None

        if path in ("", "/"):
            return httpx.Response(200, json={})

        if path.startswith("/rpc/"):
            return self._rpc(path.removeprefix("/rpc/"), body)

        table = path.strip("/")
        if table in self.failing:
            return httpx.Response(500, json={"message": "boom"})

        if request.method == "GET":
            rows = self._filter(table, params)
            query = dict(params)
            if "order" in query:
                column, _, direction = query["order"].partition(".")
                rows = sorted(
                    rows,
                    key=lambda r: (r.get(column) is None, r.get(column)),
                    reverse=direction == "desc",
                )
            offset = int(query.get("offset", 0))
            rows = rows[offset:]
            if "limit" in query:
                rows = rows[:int(query["limit"])]
            columns = query.get("select", "*")
            if columns != "*":
                wanted = columns.split(",")
                rows = [{c: r.get(c) for c in wanted} for r in rows]
            return httpx.Response(200, json=rows)

        if request.method == "HEAD":
            total = len(self._filter(table, params))
            content_range = f"0-{total - 1}/{total}" if total else "*/0"
            return httpx.Response(200, headers={"Content-Range": content_range})

        if request.method == "POST":
            created = []
            for values in body if isinstance(body, list) else [body]:
                row = self._insert(table, values)
                if row is None:
                    return httpx.Response(409, json={"code": "23505", "message": "duplicate key"})
                created.append(dict(row))
            return httpx.Response(201, json=created)

        if request.method == "PATCH":
            rows = self._filter(table, params)
            for row in rows:
                row.update(body)
            return httpx.Response(200, json=[dict(r) for r in rows])

        if request.method == "DELETE":
            doomed = self._filter(table, params)
            self.tables[table] = [r for r in self.tables[table] if r not in doomed]
            return httpx.Response(204)

        return httpx.Response(405)

    def _rpc(self, function, args):
        if function != "create_admin_user_capped":
            return httpx.Response(404, json={"message": f"function {function} not found"})
        if len(self.tables["admin_users"]) >= args["max_users"]:
            return httpx.Response(200, json=[])
        row = self._insert("admin_users", args["account"])
        if row is None:
            return httpx.Response(409, json={"code": "23505", "message": "duplicate key"})
        return httpx.Response(200, json=[dict(row)])


@pytest.fixture
def fake_store():
    return FakeRestStore()


@pytest.fixture
def settings():
    return Settings(
        STORE_URL="http://store.test",
        STORE_SERVICE_KEY="service-key",
        SECRET_KEY="test-secret",
        TOKEN_ISSUER="drkleen-admin",
        MAX_ADMIN_USERS=2,
        FRONTEND_URL="https://drkleen.test",
        API_KEY="",
    )


@pytest.fixture
def row_store(fake_store, settings):
    return RowStore(
        settings.STORE_URL,
        settings.STORE_SERVICE_KEY,
        transport=httpx.MockTransport(fake_store.handle),
    )


@pytest.fixture
def client(fake_store, settings):
    async def store_override():
        store = RowStore(
            settings.STORE_URL,
            settings.STORE_SERVICE_KEY,
            transport=httpx.MockTransport(fake_store.handle),
        )
        try:
            yield store
        finally:
            await store.close()

    app.dependency_overrides[get_store] = store_override
    app.dependency_overrides[get_settings] = lambda: settings
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def seed_admin(fake_store):
    def _seed(email="owner@example.com", password=STRONG_PASSWORD, state=AccountState.ACTIVE, **extra):
        row = {
            "email": email,
            "password_hash": hash_password(password),
            "full_name": "Olive Owner",
            "role": "admin",
            "email_verification_token": None,
            "verification_token_expires_at": None,
            "last_login": None,
            **STATE_FLAGS[state],
        }
        row.update(extra)
        return fake_store.seed("admin_users", **row)
    return _seed


@pytest.fixture
def token_service(settings):
    return TokenService.from_settings(settings)


@pytest.fixture
def admin_account(seed_admin):
    return seed_admin()


@pytest.fixture
def admin_headers(admin_account, token_service):
    token = token_service.issue({
        "sub": admin_account["id"],
        "email": admin_account["email"],
        "role": admin_account["role"],
    })
    return {"Authorization": f"Bearer {token}"}
