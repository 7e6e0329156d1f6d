"""
Shared fixtures and fakes for archiver tests.
"""
import pytest
from sqlalchemy.orm import sessionmaker

from image_archiver.database import init_db, make_engine
from image_archiver.schemas import CandidateItem, FeedMessage, FeedPage
from image_archiver.services.retry import RetryPolicy


@pytest.fixture
def engine(tmp_path):
    """File-backed SQLite so several threads can share the database"""
    engine = make_engine(f"sqlite:///{tmp_path / 'archiver.db'}")
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autoflush=False, bind=engine)


@pytest.fixture
def db_session(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def no_sleep_retry():
    """Default three-attempt policy with zero wait between attempts"""
    return RetryPolicy(factor=0, jitter=None)


def make_file(file_id: str, mimetype: str = "image/png", name: str = None) -> CandidateItem:
    return CandidateItem(
        id=file_id,
        name=name or f"{file_id}.png",
        mimetype=mimetype,
        url_private=f"https://files.slack.com/files-pri/T0/{file_id}"
    )


def make_page(*files_per_message, next_cursor=None) -> FeedPage:
    """make_page([f1, f2], [f3], next_cursor="abc") -> two messages"""
    return FeedPage(
        messages=[FeedMessage(files=list(files)) for files in files_per_message],
        next_cursor=next_cursor
    )


class FakeFeed:
    """Serves pages keyed by the cursor that requests them"""

    def __init__(self, pages):
        self.pages = list(pages)
        self.calls = []

    def list_page(self, channel_id, cursor, page_size):
        self.calls.append((channel_id, cursor, page_size))
        index = 0 if cursor is None else int(cursor)
        return self.pages[index]


def chain_pages(*pages):
    """Link pages so page i points at cursor str(i + 1); the last has none"""
    linked = []
    for i, page in enumerate(pages):
        cursor = str(i + 1) if i + 1 < len(pages) else None
        linked.append(page.model_copy(update={"next_cursor": cursor}))
    return linked


class FakeTransfer:
    """Returns drive-<id>; failures maps file id -> number of failures before success"""

    def __init__(self, failures=None):
        self.failures = dict(failures or {})
        self.calls = []

    def transfer(self, item):
        self.calls.append(item.id)
        if self.failures.get(item.id, 0) > 0:
            self.failures[item.id] -= 1
            raise RuntimeError(f"upload of {item.id} failed")
        return f"drive-{item.id}-{len(self.calls)}"


class FakeWalker:
    def __init__(self, error: Exception = None):
        self.error = error
        self.runs = 0

    def run(self):
        self.runs += 1
        if self.error:
            raise self.error
