"""
Pytest configuration and shared fixtures for gsv-backend tests.

FakeSupabase keeps tables as lists of dicts and implements the subset of the
supabase-py query builder the services use.
"""

import itertools
from copy import deepcopy
from datetime import datetime, timezone
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from gsv_backend.core.dependencies import get_current_user, get_optional_user
from gsv_backend.core.rate_limit import limiter
from gsv_backend.database.supabase_client import get_service_supabase, get_supabase
from gsv_backend.main import app
from gsv_backend.modules.auth.service import clear_auth_cache

_ids = itertools.count(1)


def _coerce(value):
    if isinstance(value, bool) or value is None:
        return value
    if isinstance(value, (int, float)):
        return value
    text = str(value)
    try:
        return float(text)
    except ValueError:
        pass
    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parsed if parsed.tzinfo else parsed.replace(tzinfo=timezone.utc)
    except ValueError:
        return text


def _same(a, b) -> bool:
    return str(a) == str(b)


def _sort_key(value):
    value = _coerce(value)
    if value is None:
        return (1, 0, 0, "")
    if isinstance(value, datetime):
        return (0, 1, value.timestamp(), "")
    if isinstance(value, (int, float)):
        return (0, 0, float(value), "")
    return (0, 2, 0, str(value))


def _split_top_level(expr: str):
    parts, depth, current = [], 0, ""
    for char in expr:
        if char in "{(":
            depth += 1
        elif char in "})":
            depth -= 1
        if char == "," and depth == 0:
            parts.append(current)
            current = ""
        else:
            current += char
    if current:
        parts.append(current)
    return parts


def _or_condition(part: str):
    column, op, value = part.split(".", 2)
    if op == "eq":
        return lambda row: _same(row.get(column), value)
    if op == "is":
        return lambda row: row.get(column) is None
    if op == "cs":
        wanted = [v for v in value.strip("{}").split(",") if v]
        return lambda row: all(v in [str(x) for x in (row.get(column) or [])] for v in wanted)
    raise NotImplementedError(f"or_ operator {op}")


class FakeResponse:
    def __init__(self, data, count=None):
        self.data = data
        self.count = count


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.mode = "select"
        self.payload = None
        self.on_conflict = "id"
        self.filters = []
        self.ordering = []
        self.row_limit = None
        self.row_range = None
        self.single_mode = None
        self.count = None

    # operations
    def select(self, columns="*", count=None):
        self.count = count
        return self

    def insert(self, data):
        self.mode, self.payload = "insert", data
        return self

    def update(self, data):
        self.mode, self.payload = "update", data
        return self

    def upsert(self, data, on_conflict="id"):
        self.mode, self.payload, self.on_conflict = "upsert", data, on_conflict
        return self

    def delete(self):
        self.mode = "delete"
        return self

    # filters
    def eq(self, column, value):
        self.filters.append(lambda row: _same(row.get(column), value))
        return self

    def neq(self, column, value):
        self.filters.append(lambda row: not _same(row.get(column), value))
        return self

    def in_(self, column, values):
        wanted = {str(v) for v in values}
        self.filters.append(lambda row: str(row.get(column)) in wanted)
        return self

    def _compare(self, column, value, op):
        def check(row):
            current = row.get(column)
            if current is None:
                return False
            return op(_coerce(current), _coerce(value))
        self.filters.append(check)
        return self

    def lte(self, column, value):
        return self._compare(column, value, lambda a, b: a <= b)

    def lt(self, column, value):
        return self._compare(column, value, lambda a, b: a < b)

    def gte(self, column, value):
        return self._compare(column, value, lambda a, b: a >= b)

    def gt(self, column, value):
        return self._compare(column, value, lambda a, b: a > b)

    def is_(self, column, value):
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def contains(self, column, values):
        self.filters.append(lambda row: all(str(v) in [str(x) for x in (row.get(column) or [])] for v in values))
        return self

    def or_(self, expr):
        conditions = [_or_condition(part) for part in _split_top_level(expr)]
        self.filters.append(lambda row: any(condition(row) for condition in conditions))
        return self

    # modifiers
    def order(self, column, desc=False):
        self.ordering.append((column, desc))
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def range(self, start, end):
        self.row_range = (start, end)
        return self

    def maybe_single(self):
        self.single_mode = "maybe"
        return self

    def single(self):
        self.single_mode = "single"
        return self

    def _matches(self, row):
        return all(condition(row) for condition in self.filters)

    def _new_row(self, values):
        row = deepcopy(values)
        row.setdefault("id", f"{self.table}-{next(_ids)}")
        row.setdefault("created_at", datetime.now(timezone.utc).isoformat())
        return row

    def execute(self):
        if self.db.fail_tables.get(self.table) == self.mode:
            raise RuntimeError(f"{self.table} {self.mode} failed")
        rows = self.db.tables.setdefault(self.table, [])

        if self.mode == "insert":
            values = self.payload if isinstance(self.payload, list) else [self.payload]
            created = [self._new_row(v) for v in values]
            rows.extend(created)
            return FakeResponse(deepcopy(created))

        if self.mode == "upsert":
            values = self.payload if isinstance(self.payload, list) else [self.payload]
            keys = [k.strip() for k in self.on_conflict.split(",")]
            saved = []
            for value in values:
                existing = next(
                    (row for row in rows if all(_same(row.get(k), value.get(k)) for k in keys)),
                    None
                )
                if existing is not None:
                    existing.update(deepcopy(value))
                    saved.append(existing)
                else:
                    row = self._new_row(value)
                    rows.append(row)
                    saved.append(row)
            return FakeResponse(deepcopy(saved))

        matched = [row for row in rows if self._matches(row)]

        if self.mode == "update":
            for row in matched:
                row.update(deepcopy(self.payload))
            return FakeResponse(deepcopy(matched))

        if self.mode == "delete":
            self.db.tables[self.table] = [row for row in rows if not self._matches(row)]
            return FakeResponse(deepcopy(matched))

        for column, desc in reversed(self.ordering):
            matched.sort(key=lambda row: _sort_key(row.get(column)), reverse=desc)
        total = len(matched)
        if self.row_range is not None:
            start, end = self.row_range
            matched = matched[start:end + 1]
        if self.row_limit is not None:
            matched = matched[:self.row_limit]

        if self.single_mode:
            if not matched:
                if self.single_mode == "single":
                    raise RuntimeError("no rows returned")
                return None
            return FakeResponse(deepcopy(matched[0]))
        return FakeResponse(deepcopy(matched), count=total if self.count else None)


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, options=None):
        self.storage.files[(self.name, path)] = content
        return {"path": path}

    def get_public_url(self, path):
        return f"https://storage.test/{self.name}/{path}"

    def remove(self, paths):
        for path in paths:
            self.storage.files.pop((self.name, path), None)
        return paths


class FakeStorage:
    def __init__(self):
        self.files = {}

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAdminAuth:
    def __init__(self):
        self.created = []

    def create_user(self, attributes):
        user = SimpleNamespace(id=f"auth-{next(_ids)}", email=attributes["email"],
                               user_metadata=attributes.get("user_metadata", {}))
        self.created.append(attributes)
        return SimpleNamespace(user=user)


class FakeAuth:
    def __init__(self):
        self.admin = FakeAdminAuth()
        self.tokens = {}
        self.get_user_calls = 0

    def add_token(self, token, user_id, email):
        self.tokens[token] = SimpleNamespace(id=user_id, email=email, user_metadata={})

    def get_user(self, jwt=None):
        self.get_user_calls += 1
        if jwt not in self.tokens:
            raise RuntimeError("invalid token")
        return SimpleNamespace(user=self.tokens[jwt])

    def sign_up(self, credentials):
        email = credentials["email"]
        if any(user.email == email for user in self.tokens.values()):
            raise RuntimeError("User already registered")
        user = SimpleNamespace(id=f"auth-{next(_ids)}", email=email,
                               user_metadata=credentials.get("options", {}).get("data", {}))
        self.tokens[f"token-{user.id}"] = user
        return SimpleNamespace(user=user, session=None)

    def sign_out(self):
        return None


class FakeSupabase:
    def __init__(self):
        self.tables = {}
        self.fail_tables = {}
        self.storage = FakeStorage()
        self.auth = FakeAuth()

    def table(self, name):
        return FakeQuery(self, name)

    def seed(self, table, *rows):
        self.tables.setdefault(table, []).extend(deepcopy(list(rows)))

    def rows(self, table):
        return self.tables.get(table, [])


FOUNDER = {"id": "founder-1", "email": "founder@gsv.org", "name": "Founder", "role": "founder", "status": "active"}
INTERN = {"id": "intern-1", "email": "intern@gsv.org", "name": "Intern", "role": "intern", "status": "active"}
VOLUNTEER = {"id": "volunteer-1", "email": "vol@example.com", "name": "Volunteer", "role": "volunteer", "status": "active"}
TEACHER = {"id": "teacher-1", "email": "teacher@school.org", "name": "Teacher", "role": "teacher", "status": "active"}


@pytest.fixture(autouse=True)
def reset_process_state():
    limiter.reset()
    clear_auth_cache()
    yield
    limiter.reset()
    clear_auth_cache()


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def client(db):
    app.dependency_overrides[get_supabase] = lambda: db
    app.dependency_overrides[get_service_supabase] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def login(client):
    """Authenticate subsequent requests as the given user dict; None logs out."""
    def _login(user):
        if user is None:
            app.dependency_overrides.pop(get_current_user, None)
            app.dependency_overrides[get_optional_user] = lambda: None
            return
        app.dependency_overrides[get_current_user] = lambda: user
        app.dependency_overrides[get_optional_user] = lambda: user
    return _login
