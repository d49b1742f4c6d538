import os

os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_KEY", "anon-key")

from collections import defaultdict, deque
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient
from supabase import PostgrestAPIError as APIError

from app.main import app
from app.core.dependencies import get_session_supabase, get_user_supabase
from app.database.supabase_client import get_supabase
from app.modules.auth.service import clear_auth_cache

USER_ID = "user-1"
OTHER_USER_ID = "user-2"
TOKENS = {"valid-token": USER_ID, "other-token": OTHER_USER_ID}
AUTH = {"Authorization": "Bearer valid-token"}


def api_error(code: str, message: str = "remote error") -> APIError:
    return APIError({"message": message, "code": code, "hint": None, "details": None})


class FakeQuery:
    """Query builder that records every call and returns the next queued result on execute()"""

    def __init__(self, client, table_name):
        self.client = client
        self.table_name = table_name
        self.calls = []

    def __getattr__(self, name):
        def record(*args, **kwargs):
            self.calls.append((name, args, kwargs))
            return self
        return record

    def called(self, name):
        return [(args, kwargs) for call, args, kwargs in self.calls if call == name]

    def execute(self):
        return self.client.next_result(self.table_name)


class FakeRpc:
    def __init__(self, client, name):
        self.client = client
        self.name = name

    def execute(self):
        return self.client.next_result(f"rpc:{self.name}")


class FakeBucket:
    def __init__(self, storage, name):
        self.storage = storage
        self.name = name

    def upload(self, path, content, file_options=None):
        self.storage.uploads.append((self.name, path, content, file_options))
        return SimpleNamespace(path=path)

    def get_public_url(self, path):
        return f"https://project.supabase.test/storage/v1/object/public/{self.name}/{path}"

    def remove(self, paths):
        self.storage.removed.append((self.name, list(paths)))
        return []


class FakeStorage:
    def __init__(self):
        self.uploads = []
        self.removed = []

    def from_(self, bucket):
        return FakeBucket(self, bucket)


class FakeAuthAdmin:
    def __init__(self, auth):
        self.auth = auth

    def sign_out(self, jwt, scope="global"):
        self.auth.revoked.append(jwt)


class FakeAuth:
    """Like the real auth client, a successful sign-in is remembered as the client's session"""

    def __init__(self):
        self.sign_up_response = None
        self.sign_in_response = None
        self.error = None
        self.session = None
        self.revoked = []
        self.admin = FakeAuthAdmin(self)

    def get_user(self, jwt=None):
        if jwt not in TOKENS:
            raise Exception("invalid JWT")
        user = SimpleNamespace(
            id=TOKENS[jwt],
            email=f"{TOKENS[jwt]}@example.com",
            user_metadata={},
            app_metadata={},
            created_at=None,
            updated_at=None,
        )
        return SimpleNamespace(user=user)

    def sign_up(self, credentials):
        if self.error:
            raise self.error
        return self.sign_up_response

    def sign_in_with_password(self, credentials):
        if self.error:
            raise self.error
        response = self.sign_in_response
        if callable(response):
            response = response(credentials)
        self.session = getattr(response, "session", None)
        return response

    def sign_out(self):
        if self.session is not None:
            self.revoked.append(self.session.access_token)
            self.session = None


class FakeSupabase:
    """Scripted stand-in for supabase.Client.

    Results are queued per table (or per "rpc:<name>") and handed out in order;
    an unscripted call returns an empty result. Queue an exception to make the
    next call fail.
    """

    def __init__(self):
        self.results = defaultdict(deque)
        self.queries = []
        self.rpc_calls = []
        self.auth = FakeAuth()
        self.storage = FakeStorage()

    def queue(self, table_name, data=None, count=None, error=None):
        self.results[table_name].append(error or SimpleNamespace(data=data, count=count))
        return self

    def queue_rpc(self, name, data=None, error=None):
        return self.queue(f"rpc:{name}", data=data, error=error)

    def next_result(self, key):
        if not self.results[key]:
            return SimpleNamespace(data=[], count=0)
        result = self.results[key].popleft()
        if isinstance(result, Exception):
            raise result
        return result

    def table(self, name):
        query = FakeQuery(self, name)
        self.queries.append(query)
        return query

    def rpc(self, name, params=None):
        self.rpc_calls.append((name, params or {}))
        return FakeRpc(self, name)

    def queries_for(self, table_name):
        return [q for q in self.queries if q.table_name == table_name]


@pytest.fixture
def supabase():
    return FakeSupabase()


@pytest.fixture
def client(supabase):
    clear_auth_cache()
    app.dependency_overrides[get_supabase] = lambda: supabase
    app.dependency_overrides[get_user_supabase] = lambda: supabase
    app.dependency_overrides[get_session_supabase] = lambda: supabase
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    clear_auth_cache()
