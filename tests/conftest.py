import pytest

from repoprompt.app import SOURCE_KEY, STORE_KEY, create_app
from repoprompt.store import SupabaseStore
from tests.fakes import FakeSource, FakeSupabase, d, f


@pytest.fixture
def source():
    return FakeSource(
        listings={
            "": [f("README.md"), d("src")],
            "src": [f("src/main.py"), f("src/util.py"), d("src/assets")],
            "src/assets": [f("src/assets/icon.ico"), f("src/assets/broken.txt")],
        },
        files={
            "README.md": "hello there world",
            "src/main.py": "import os\nprint(os)\n",
            "src/util.py": "def f():  pass",
            "src/assets/icon.ico": "binary",
        },
        broken=["src/assets/broken.txt"],
    )


@pytest.fixture
def db():
    return FakeSupabase()


@pytest.fixture
def store(db):
    return SupabaseStore(db)


@pytest.fixture
def app(tmp_path, source, store):
    app = create_app(
        {
            "TESTING": True,
            "GITHUB_OWNER": "acme",
            "GITHUB_REPO": "widgets",
            "GITHUB_BRANCH": "main",
            "SUPABASE_URL": "",
            "SUPABASE_KEY": "",
            "LOCAL_ROOT": tmp_path.resolve(),
        }
    )
    app.extensions[SOURCE_KEY] = source
    app.extensions[STORE_KEY] = store
    return app


@pytest.fixture
def client(app):
    return app.test_client()
