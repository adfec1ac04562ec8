"""
Shared fixtures: in-memory SQLite database, translation service with the
passthrough translator, and records mirroring typical translatable data.
"""
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from localesync.core.database import Base
from localesync.core.redis import redis_connection
from localesync.models.translation import Translation  # noqa: F401
from localesync.services.translation_service import TranslationService
from localesync.services.translator import PassthroughTranslator

from tests.models import Badge, Category, Employer, Job, Page, register_models


# Test database (in-memory SQLite shared by every session)
SQLALCHEMY_DATABASE_URL = "sqlite://"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(autouse=True)
def no_redis(monkeypatch):
    """Use process-local locks; tests never talk to a Redis server"""
    monkeypatch.setattr(redis_connection, "_attempted", True)
    monkeypatch.setattr(redis_connection, "_connected", False)
    monkeypatch.setattr(redis_connection, "_client", None)


@pytest.fixture(autouse=True)
def translation_configs():
    """Restore model configs that a test may have replaced"""
    register_models()
    yield
    register_models()


@pytest.fixture(scope="function")
def db_session():
    """Create test database session"""
    Base.metadata.create_all(bind=engine)
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def service(db_session):
    """Translation service with the passthrough translator and in-memory queue"""
    return TranslationService(db_session, translator=PassthroughTranslator())


def _insert(db_session, instance):
    # Fixture rows are inserted directly, without the translation lifecycle
    db_session.add(instance)
    db_session.commit()
    db_session.refresh(instance)
    return instance


@pytest.fixture
def admin_category(db_session):
    return _insert(db_session, Category(name="Admin", short_name="adm", path="/admin"))


@pytest.fixture
def hilton(db_session):
    return _insert(db_session, Employer(name="Hilton", profile_html="<p>Hotels worldwide</p>"))


@pytest.fixture
def home_page(db_session):
    return _insert(db_session, Page(title="Home", heading="Welcome", subhead="Hello", content="Body", published=False))


@pytest.fixture
def chef_job(db_session):
    return _insert(db_session, Job(title="Chef", headline="Cook for us", ad_html="<p>Apply</p>", posted_status="draft"))


@pytest.fixture
def gold_badge(db_session):
    return _insert(db_session, Badge(name="Gold", color="yellow"))
