"""
conftest.py
-----------
Shared pytest fixtures for accessdb tests.

Provides fixtures for:
- Database setup and teardown
- Manager instances bound to a test session
- Entry and label factories
"""
import pytest

from accessdb.core.paths import ALEMBIC_DIR


# ----- Sample Metadata Fixtures -----

@pytest.fixture
def complete_game_metadata():
    """Game metadata with every field the completeness check needs."""
    return {
        "name": "Celeste",
        "description": "Precision platformer with an assist mode",
        "photos": ["storage-celeste-1"],
        "overall_rating": 5,
        "visual_accessibility": 4,
        "auditory_accessibility": 5,
        "motor_accessibility": 3,
        "cognitive_accessibility": 4,
        "website": "https://www.celestegame.com",
        "platforms": ["PC", "Switch"],
        "developer": "Maddy Makes Games",
    }


@pytest.fixture
def complete_place_metadata():
    """Place metadata with a full location."""
    return {
        "name": "City Library",
        "description": "Public library with step-free access",
        "photos": ["storage-library-1"],
        "overall_rating": 4,
        "visual_accessibility": 3,
        "auditory_accessibility": 4,
        "motor_accessibility": 5,
        "cognitive_accessibility": 4,
        "website": "https://library.example.org",
        "place_type": "library",
        "location": {
            "address": "1 Main Street",
            "city": "Montreal",
            "country": "Canada",
            "latitude": 45.5,
            "longitude": -73.56,
        },
        "wheelchair_accessible": "yes",
    }


# ----- Test Database Fixtures -----

@pytest.fixture
def test_db_path(tmp_path):
    """Create temporary test database path."""
    return tmp_path / "test.db"


@pytest.fixture
def test_alembic_dir():
    """Path to the packaged Alembic directory."""
    return ALEMBIC_DIR


@pytest.fixture
def test_db(test_db_path, test_alembic_dir):
    """
    Create test database instance with schema.

    A fresh file gets every table on construction.
    Database is torn down after the test.
    """
    from accessdb.database.manager import AccessDB

    db = AccessDB(db_path=test_db_path, alembic_dir=test_alembic_dir)

    yield db

    db.close()
    if test_db_path.exists():
        test_db_path.unlink()


@pytest.fixture
def db_session(test_db):
    """
    Create a database session for tests.

    Provides a session with automatic rollback after test.
    """
    with test_db.session_scope() as session:
        yield session
        session.rollback()


@pytest.fixture
def entry_manager(db_session):
    """Create EntryManager instance for testing."""
    from accessdb.database.managers.entry_manager import EntryManager
    return EntryManager(db_session)


@pytest.fixture
def tag_manager(db_session):
    """Create TagManager instance for testing."""
    from accessdb.database.managers.tag_manager import TagManager
    return TagManager(db_session)


@pytest.fixture
def feature_manager(db_session):
    """Create FeatureManager instance for testing."""
    from accessdb.database.managers.feature_manager import FeatureManager
    return FeatureManager(db_session)


@pytest.fixture
def comment_manager(db_session):
    """Create CommentManager instance for testing."""
    from accessdb.database.managers.comment_manager import CommentManager
    return CommentManager(db_session)


@pytest.fixture
def review_manager(db_session):
    """Create ReviewManager instance for testing."""
    from accessdb.database.managers.review_manager import ReviewManager
    return ReviewManager(db_session)


# ----- Factories -----

@pytest.fixture
def make_entry(entry_manager):
    """
    Factory creating a minimal entry.

    Usage:
        game = make_entry("game", name="Hades")
    """

    def _make(category="game", user_id="user-1", **fields):
        metadata = {"name": f"Test {category}", "overall_rating": 3}
        metadata.update(fields)
        return entry_manager.create(category, user_id, metadata)

    return _make


@pytest.fixture
def make_tag(tag_manager):
    """Factory creating a tag and returning its id."""

    def _make(name, accessibility_type="general"):
        return tag_manager.create({"name": name, "accessibility_type": accessibility_type})

    return _make


@pytest.fixture
def make_feature(feature_manager):
    """Factory creating a feature and returning its id."""

    def _make(name, accessibility_type="general"):
        return feature_manager.create(
            {"name": name, "accessibility_type": accessibility_type}
        )

    return _make
