"""Pytest configuration and fixtures for testing."""
import os
from typing import Generator

# Set test environment before importing app modules
os.environ['DATABASE_URL'] = 'sqlite:///./test.db'
os.environ['LOG_LEVEL'] = 'DEBUG'

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from config.database import get_db
from models.base_model import base as Base
from models.category import CategoryModel
from main import create_fastapi_app


# Test database URL
TEST_DATABASE_URL = "sqlite:///./test.db"  # File-based DB for inspection


@pytest.fixture(scope="session")
def engine():
    """Create a SQLite engine shared by the whole test session."""
    test_engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},  # SQLite specific
        echo=False
    )
    yield test_engine
    test_engine.dispose()


@pytest.fixture(scope="function")
def db_session_factory(engine) -> Generator[sessionmaker, None, None]:
    Base.metadata.create_all(bind=engine)
    connection = engine.connect()
    transaction = connection.begin()
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=connection)
    try:
        yield SessionLocal
    finally:
        # A failed flush inside a test may already have ended the outer transaction
        if transaction.is_active:
            transaction.rollback()
        connection.close()
        Base.metadata.drop_all(bind=engine)  # Drop tables after test


@pytest.fixture(scope="function")
def api_client(db_session_factory: sessionmaker) -> Generator[TestClient, None, None]:
    """Create a test client whose requests share the test transaction."""
    app = create_fastapi_app()

    def override_get_db():
        session = db_session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def seeded_faker() -> Faker:
    """Faker with a fixed seed so generated names are reproducible."""
    faker = Faker()
    faker.seed_instance(2025)
    return faker


# Database seeding fixtures
CATEGORY_NAMES = ["Books", "Tools", "Games", "Garden", "Electronics", "Toys", "Shoes", "Music"]


@pytest.fixture(scope="function")
def seeded_db(db_session_factory: sessionmaker) -> dict:
    session = db_session_factory()
    try:
        categories = [CategoryModel(name=name) for name in CATEGORY_NAMES]
        session.add_all(categories)
        session.flush()
        for category in categories:
            session.refresh(category)

        # No session.commit() here; the overarching transaction from db_session_factory
        # will handle the rollback at the end of the test.
        return {
            "categories": categories,
            "names": list(CATEGORY_NAMES),
            "db_session": session,
        }
    finally:
        session.close()
