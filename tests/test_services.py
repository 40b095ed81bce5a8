"""Unit tests for service layer."""
import pytest
from unittest.mock import MagicMock

from sqlalchemy.exc import OperationalError

from query_options import QueryValidationError, parse_query_options
from repositories.base_repository_impl import StorageError
from repositories.category_repository import CategoryRepository
from services import category_service
from services.category_service import SEED_BATCH_SIZE, CategoryService
from services.commerce_provider import CommerceProvider, with_commerce_provider


def _options(**params):
    return parse_query_options(params.items())


class TestCategoryServiceQuery:
    """Tests for CategoryService.query with OData options."""

    def test_query_without_options_returns_every_row(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())

        result = service.query(_options())

        assert sorted(c.name for c in result.items) == sorted(seeded_db["names"])
        assert all(c.id is not None and c.name for c in result.items)
        assert result.count is None

    def test_query_filter_contains(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())

        result = service.query(_options(**{"$filter": "contains(name,'oo')"}))

        assert sorted(c.name for c in result.items) == ["Books", "Tools"]

    def test_query_filter_eq(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())

        result = service.query(_options(**{"$filter": "name eq 'Garden'"}))

        assert [c.name for c in result.items] == ["Garden"]

    def test_query_orderby_desc(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())

        result = service.query(_options(**{"$orderby": "name desc"}))

        assert [c.name for c in result.items] == sorted(seeded_db["names"], reverse=True)

    def test_query_top_and_skip_are_stable(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())
        ids = sorted(c.id for c in seeded_db["categories"])

        first = service.query(_options(**{"$top": "3"}))
        second = service.query(_options(**{"$top": "3", "$skip": "3"}))

        assert [c.id for c in first.items] == ids[:3]
        assert [c.id for c in second.items] == ids[3:6]

    def test_query_count_ignores_paging(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())

        result = service.query(_options(**{"$count": "true", "$top": "2"}))

        assert len(result.items) == 2
        assert result.count == len(seeded_db["names"])

    def test_query_count_applies_filter(self, db_session_factory, seeded_db):
        service = CategoryService(db_session_factory())

        result = service.query(_options(**{"$count": "true", "$filter": "startswith(name,'G')"}))

        assert result.count == 2
        assert sorted(c.name for c in result.items) == ["Games", "Garden"]

    def test_query_select_rejected_before_storage(self, db_session_factory, monkeypatch):
        service = CategoryService(db_session_factory())
        fetch = MagicMock()
        monkeypatch.setattr(CategoryRepository, "fetch", fetch)

        with pytest.raises(QueryValidationError) as exc_info:
            service.query(_options(**{"$select": "name"}))

        assert exc_info.value.option == "$select"
        fetch.assert_not_called()

    def test_query_storage_failure(self):
        session = MagicMock()
        session.scalars.side_effect = OperationalError("SELECT", {}, Exception("server closed the connection"))
        service = CategoryService(session)

        with pytest.raises(StorageError):
            service.query(_options())


class TestCategoryServiceSeed:
    """Tests for CategoryService.seed."""

    def test_seed_inserts_batch(self, db_session_factory, seeded_faker):
        session = db_session_factory()
        service = CategoryService(session, faker=seeded_faker)

        inserted = service.seed()

        assert inserted == SEED_BATCH_SIZE == 100
        rows = service.query(_options()).items
        assert len(rows) == 100
        assert all(row.name in CommerceProvider.departments for row in rows)

    def test_seed_twice_is_not_deduplicated(self, db_session_factory, seeded_faker):
        session = db_session_factory()
        service = CategoryService(session, faker=seeded_faker)

        service.seed()
        service.seed()

        assert service.query(_options(**{"$count": "true", "$top": "0"})).count == 200

    def test_seeded_rows_are_queryable(self, db_session_factory, seeded_faker):
        service = CategoryService(db_session_factory(), faker=seeded_faker)
        service.seed(count=5)

        reader = CategoryService(db_session_factory())
        stored = reader.repository.fetch(reader.repository.queryable())
        result = reader.query(_options())

        assert len(stored) == 5
        assert {(c.id, c.name) for c in result.items} == {(c.id, c.name) for c in stored}

    def test_seed_commits_once(self, seeded_faker):
        session = MagicMock()
        service = CategoryService(session, faker=seeded_faker)

        service.seed()

        session.add_all.assert_called_once()
        assert len(session.add_all.call_args.args[0]) == 100
        session.commit.assert_called_once()

    def test_query_does_not_build_faker(self, db_session_factory, monkeypatch):
        faker_class = MagicMock()
        monkeypatch.setattr(category_service, "Faker", faker_class)
        category_service.default_faker.cache_clear()

        CategoryService(db_session_factory()).query(_options())

        faker_class.assert_not_called()

    def test_default_faker_is_shared_across_services(self):
        first = CategoryService(MagicMock())
        second = CategoryService(MagicMock())

        first.seed(count=3)
        second.seed(count=3)

        assert first.faker is second.faker
        assert sum(isinstance(p, CommerceProvider) for p in first.faker.providers) == 1

    def test_seed_commit_failure_raises_storage_error(self, seeded_faker):
        session = MagicMock()
        session.commit.side_effect = OperationalError("INSERT", {}, Exception("database is locked"))
        service = CategoryService(session, faker=seeded_faker)

        with pytest.raises(StorageError):
            service.seed()


class TestCommerceProvider:
    """Tests for the Faker commerce provider."""

    def test_categories_count(self, seeded_faker):
        seeded_faker.add_provider(CommerceProvider)

        names = seeded_faker.commerce_categories(100)

        assert len(names) == 100
        assert set(names) <= set(CommerceProvider.departments)

    def test_seeded_generator_is_reproducible(self):
        from faker import Faker

        first, second = Faker(), Faker()
        for faker in (first, second):
            faker.add_provider(CommerceProvider)
            faker.seed_instance(7)

        assert first.commerce_categories(10) == second.commerce_categories(10)

    def test_with_commerce_provider_registers_once(self, seeded_faker):
        with_commerce_provider(seeded_faker)
        with_commerce_provider(seeded_faker)

        assert sum(isinstance(p, CommerceProvider) for p in seeded_faker.providers) == 1
        assert seeded_faker.commerce_category() in CommerceProvider.departments
