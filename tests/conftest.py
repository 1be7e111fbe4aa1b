"""
Test fixtures: an in-memory stand-in for the supabase-py client and a TestClient
with authentication overridden.
"""

import copy
import re
import uuid
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError

from app.core.dependencies import get_current_user
from app.database.supabase_client import get_optional_supabase_admin, get_session_client_factory, get_supabase
from app.main import app
from tests.factories import timestamp

# Columns the database enforces uniqueness on
UNIQUE_KEYS = {
    "subjects": [("code",)],
    "students": [("student_id",)],
    "subject_assignments": [("teacher_id", "subject_id", "class_id")],
    "user_permissions": [("user_id", "permission_id")],
    "permissions": [("code",)],
    "term_settings": [("academic_year", "term")],
}

EMBED_PATTERN = re.compile(r"(\w+)\(([^)]*)\)")


def _sort_key(column):
    def key(row):
        value = row.get(column)
        return (value is None, "" if value is None else value)
    return key


class FakeResult:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db: "FakeSupabase", table: str):
        self.db = db
        self.table = table
        self.action = "select"
        self.columns = "*"
        self.count = None
        self.payload = None
        self.on_conflict = None
        self.filters = []
        self.orders = []
        self.row_limit = None
        self.want_single = False

    # Actions

    def select(self, columns="*", count=None):
        self.columns = columns
        self.count = count
        return self

    def insert(self, rows):
        self.action, self.payload = "insert", rows
        return self

    def update(self, data):
        self.action, self.payload = "update", data
        return self

    def upsert(self, rows, on_conflict=None):
        self.action, self.payload, self.on_conflict = "upsert", rows, on_conflict
        return self

    def delete(self):
        self.action = "delete"
        return self

    # Filters and modifiers

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: set(values) <= set(row.get(column) or []))
        return self

    def order(self, column, desc=False):
        self.orders.append((column, desc))
        return self

    def limit(self, n):
        self.row_limit = n
        return self

    def single(self):
        self.want_single = True
        return self

    # Execution

    def _rows(self):
        return self.db.tables.setdefault(self.table, [])

    def _matches(self, row):
        return all(f(row) for f in self.filters)

    def _embed(self, row):
        row = copy.deepcopy(row)
        for name, columns in EMBED_PATTERN.findall(self.columns):
            foreign_key = f"{name.rstrip('s')}_id"
            target = next(
                (r for r in self.db.tables.get(name, []) if r["id"] == row.get(foreign_key)), None
            )
            if target is not None:
                wanted = [c.strip() for c in columns.split(",")]
                target = {c: target.get(c) for c in wanted}
            row[name] = target
        return row

    def _check_unique(self, candidate, ignore=None):
        for key in UNIQUE_KEYS.get(self.table, []):
            for row in self._rows():
                if row is ignore:
                    continue
                if all(row.get(k) == candidate.get(k) for k in key):
                    raise APIError({
                        "code": "23505",
                        "message": f'duplicate key value violates unique constraint "{self.table}_{"_".join(key)}_key"',
                    })

    def _insert_one(self, values):
        row = {"created_at": timestamp(), **copy.deepcopy(values)}
        row.setdefault("id", str(uuid.uuid4()))
        self._check_unique(row)
        self._rows().append(row)
        return copy.deepcopy(row)

    def execute(self):
        self.db.calls.append((self.table, self.action))
        if self.table in self.db.failing_tables or (self.table, self.action) in self.db.failing_actions:
            raise APIError({"code": "XX000", "message": f"Failed to reach {self.table}"})

        if self.action == "insert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            return FakeResult([self._insert_one(values) for values in payload])

        if self.action == "upsert":
            payload = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in (self.on_conflict or "id").split(",")]
            written = []
            for values in payload:
                existing = next(
                    (r for r in self._rows() if all(r.get(k) == values.get(k) for k in keys)), None
                )
                if existing:
                    existing.update(copy.deepcopy(values))
                    written.append(copy.deepcopy(existing))
                else:
                    written.append(self._insert_one(values))
            return FakeResult(written)

        matched = [r for r in self._rows() if self._matches(r)]

        if self.action == "update":
            for row in matched:
                self._check_unique({**row, **self.payload}, ignore=row)
                row.update(copy.deepcopy(self.payload))
            return FakeResult([copy.deepcopy(r) for r in matched])

        if self.action == "delete":
            for blocked_id in self.db.fk_blocked.get(self.table, []):
                if any(r["id"] == blocked_id for r in matched):
                    raise APIError({
                        "code": "23503",
                        "message": f"update or delete on table \"{self.table}\" violates foreign key constraint",
                    })
            self.db.tables[self.table] = [r for r in self._rows() if not any(r is m for m in matched)]
            return FakeResult([copy.deepcopy(r) for r in matched])

        for column, desc in reversed(self.orders):
            matched.sort(key=_sort_key(column), reverse=desc)
        if self.row_limit is not None:
            matched = matched[:self.row_limit]
        rows = [self._embed(r) for r in matched]
        count = len(rows) if self.count else None

        if self.want_single:
            if len(rows) != 1:
                raise APIError({
                    "code": "PGRST116",
                    "message": "JSON object requested, multiple (or no) rows returned",
                })
            return FakeResult(rows[0], count)
        return FakeResult(rows, count)


class FakeAdminAuth:
    def __init__(self, auth: "FakeAuth"):
        self.auth = auth

    def create_user(self, attributes):
        user_id = str(uuid.uuid4())
        self.auth.users[user_id] = {"id": user_id, **attributes}
        return SimpleNamespace(user=SimpleNamespace(id=user_id, email=attributes.get("email")))

    def update_user_by_id(self, user_id, attributes):
        self.auth.users.setdefault(user_id, {"id": user_id}).update(attributes)
        return SimpleNamespace(user=SimpleNamespace(id=user_id))

    def delete_user(self, user_id):
        self.auth.users.pop(user_id, None)

    def sign_out(self, jwt, scope="global"):
        self.auth.revoked.append(jwt)

    def invite_user_by_email(self, email, options=None):
        self.auth.invites.append(email)
        return SimpleNamespace(user=None)


class FakeAuth:
    """Auth API of one client. Clients made with `for_new_client` share the accounts
    but keep their own signed-in session, like separate supabase-py clients."""

    def __init__(self, shared: "FakeAuth" = None):
        if shared is None:
            self.users = {}
            self.invites = []
            self.sessions = {}
            self.otp_tokens = {}  # token hash -> (auth user id, type)
            self.revoked = []
            self.reset_requests = []
        else:
            self.users = shared.users
            self.invites = shared.invites
            self.sessions = shared.sessions
            self.otp_tokens = shared.otp_tokens
            self.revoked = shared.revoked
            self.reset_requests = shared.reset_requests
        self.session = None
        self.admin = FakeAdminAuth(self)

    def for_new_client(self) -> "FakeAuth":
        return FakeAuth(shared=self)

    def _sign_in(self, user):
        token = f"token-{user['id']}"
        self.sessions[token] = user
        self.session = SimpleNamespace(access_token=token, refresh_token="refresh", expires_in=3600)
        return SimpleNamespace(
            user=SimpleNamespace(
                id=user["id"], email=user["email"], email_confirmed_at=user.get("email_confirmed_at", "2025-01-01")
            ),
            session=self.session,
        )

    def sign_in_with_password(self, credentials):
        for user in self.users.values():
            if user.get("email") == credentials["email"] and user.get("password") == credentials["password"]:
                return self._sign_in(user)
        raise Exception("Invalid login credentials")

    def get_user(self, jwt=None):
        user = self.sessions.get(jwt)
        if not user:
            raise Exception("invalid JWT")
        return SimpleNamespace(user=SimpleNamespace(
            id=user["id"], email=user["email"], user_metadata={}, app_metadata={}, email_confirmed_at="2025-01-01"
        ))

    def sign_out(self, options=None):
        self.session = None

    def verify_otp(self, params):
        user_id, otp_type = self.otp_tokens.get(params["token_hash"], (None, None))
        if user_id not in self.users or otp_type != params["type"]:
            raise Exception("Token has expired or is invalid")
        del self.otp_tokens[params["token_hash"]]
        return self._sign_in(self.users[user_id])

    def reset_password_for_email(self, email, options=None):
        self.reset_requests.append((email, options))


class FakeSupabase:
    def __init__(self, tables=None):
        self.tables = copy.deepcopy(tables or {})
        self.calls = []
        self.failing_tables = set()
        self.failing_actions = set()  # (table, action) pairs that raise
        self.fk_blocked = {}  # table -> ids whose delete violates a foreign key
        self.auth = FakeAuth()
        self.session_clients = []

    def table(self, name):
        return FakeQuery(self, name)

    def new_session_client(self):
        """A client for one auth call; shares tables and accounts, not the session"""
        session_client = SimpleNamespace(auth=self.auth.for_new_client(), table=self.table)
        self.session_clients.append(session_client)
        return session_client

    def rows(self, name):
        return self.tables.get(name, [])


ADMIN_USER = {
    "id": "user-admin",
    "auth_user_id": "auth-admin",
    "email": "admin@school.test",
    "name": "Head Teacher",
    "role": "admin",
    "is_active": True,
}

TEACHER_USER = {
    "id": "user-teacher",
    "auth_user_id": "auth-teacher",
    "email": "ama@school.test",
    "name": "Ama Mensah",
    "role": "subject_teacher",
    "is_active": True,
    "is_class_teacher": False,
    "is_subject_teacher": True,
}


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def current_user():
    return dict(ADMIN_USER)


@pytest.fixture
def client(db, current_user):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_optional_supabase_admin] = lambda: db
    app.dependency_overrides[get_session_client_factory] = lambda: db.new_session_client
    app.dependency_overrides[get_current_user] = lambda: current_user
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def teacher_client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_optional_supabase_admin] = lambda: db
    app.dependency_overrides[get_session_client_factory] = lambda: db.new_session_client
    app.dependency_overrides[get_current_user] = lambda: dict(TEACHER_USER)
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
