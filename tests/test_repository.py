"""
Tests for the generic repository.

Tests verify:
- CRUD operations commit through the interceptor chain
- Reads are scoped; misses are indistinguishable
- Soft delete and administrative recovery
- Commit failures roll back and surface as CommitError
"""

import uuid
from unittest.mock import patch

import pytest
from sqlalchemy.exc import IntegrityError

from organizer.models import ChangeLogEntityType, ChangeOperation, Project, ShoppingList, Space, SpaceType, Tenant
from organizer.persistence.repository import Repository
from organizer.persistence.session import unit_of_work
from shared.utils.exceptions import CommitError, NotFoundError
from tests.conftest import FIXED_NOW, change_log_rows, make_space


def new_space(tenant, name="Home"):
    return Space(
        tenant_id=tenant.id,
        name=name,
        normalized_name=name.upper(),
        space_type=SpaceType.PERSONAL,
    )


class TestCreate:
    """Tests for Repository.create()."""

    def test_create_assigns_identity_and_audit_fields(self, db_session, tenant_a):
        space = Repository(Space, db_session).create(new_space(tenant_a))

        assert isinstance(space.id, uuid.UUID)
        assert space.created_at == space.updated_at == FIXED_NOW
        assert Repository(Space, db_session).get(space.id) is space

    def test_create_logs_created(self, db_session, tenant_a):
        space = Repository(Space, db_session).create(new_space(tenant_a))

        row = change_log_rows(db_session)[-1]
        assert row.entity_id == space.id
        assert row.operation == ChangeOperation.CREATED

    def test_create_failure_raises_commit_error(self, db_session, tenant_a):
        """A unique constraint violation rolls back and stays opaque."""
        repo = Repository(Tenant, db_session)
        before = len(change_log_rows(db_session))

        with pytest.raises(CommitError) as exc_info:
            repo.create(Tenant(name="Duplicate", slug=tenant_a.slug))

        assert isinstance(exc_info.value.__cause__, IntegrityError)
        assert exc_info.value.operation == "create Tenant"
        assert repo.count() == 1
        assert len(change_log_rows(db_session)) == before


class TestReads:
    """Tests for scoped lookups."""

    @pytest.fixture
    def projects(self, db_session, tenant_a):
        space = make_space(db_session, tenant_a)
        repo = Repository(Project, db_session)
        return [
            repo.create(Project(space_id=space.id, name=name, normalized_name=name.upper()))
            for name in ("Bravo", "Alpha", "Charlie")
        ]

    def test_get_or_raise(self, db_session, projects):
        repo = Repository(Project, db_session)

        assert repo.get_or_raise(projects[0].id) is projects[0]
        with pytest.raises(NotFoundError) as exc_info:
            repo.get_or_raise(uuid.uuid4())
        assert exc_info.value.status_code == 404

    def test_misses_are_indistinguishable(self, db_session, tenant_context, tenant_a, tenant_b):
        """Deleted, foreign-tenant and nonexistent rows all read as missing."""
        repo = Repository(Space, db_session)
        deleted = repo.create(new_space(tenant_a, "Deleted"))
        repo.soft_delete(deleted.id)
        foreign = repo.create(new_space(tenant_b, "Foreign"))
        tenant_context.tenant_id = tenant_a.id

        for entity_id in (deleted.id, foreign.id, uuid.uuid4()):
            assert repo.get(entity_id) is None
            assert not repo.exists(entity_id)
            with pytest.raises(NotFoundError) as exc_info:
                repo.get_or_raise(entity_id)
            assert exc_info.value.detail == f"Space with ID {entity_id} not found"

    def test_list_ordering_and_paging(self, db_session, projects):
        repo = Repository(Project, db_session)

        names = [project.name for project in repo.list(order_by=Project.name)]
        assert names == ["Alpha", "Bravo", "Charlie"]

        page = repo.list(order_by=Project.name, offset=1, limit=1)
        assert [project.name for project in page] == ["Bravo"]

    def test_find_by_ids_skips_invisible(self, db_session, projects):
        repo = Repository(Project, db_session)
        repo.soft_delete(projects[1].id)

        found = repo.find_by_ids([projects[0].id, projects[1].id, uuid.uuid4()])
        assert found == [projects[0]]
        assert repo.find_by_ids([]) == []

    def test_count_and_exists_are_scoped(self, db_session, projects):
        repo = Repository(Project, db_session)
        assert repo.count() == 3
        assert repo.exists(projects[2].id)

        repo.soft_delete(projects[2].id)
        assert repo.count() == 2
        assert not repo.exists(projects[2].id)


class TestUpdate:
    """Tests for Repository.update()."""

    def test_update_without_change_still_bumps_updated_at(self, db_session, clock, tenant_a):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))
        later = clock.advance(minutes=10)

        repo.update(space)

        assert space.updated_at == later
        assert space.created_at == FIXED_NOW
        row = change_log_rows(db_session)[-1]
        assert row.operation == ChangeOperation.UPDATED
        assert row.timestamp == later

    def test_update_persists_changes(self, db_session, session_factory, tenant_a):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))

        space.name = "Cabin"
        repo.update(space)

        with session_factory() as session:
            assert Repository(Space, session).get(space.id).name == "Cabin"

    def test_update_of_transient_entity_raises(self, db_session, tenant_a):
        with pytest.raises(NotFoundError):
            Repository(Space, db_session).update(new_space(tenant_a))

    def test_update_of_pending_entity_raises(self, db_session, tenant_a):
        space = new_space(tenant_a)
        db_session.add(space)

        with pytest.raises(NotFoundError):
            Repository(Space, db_session).update(space)

    def test_update_of_invisible_entity_raises(self, db_session, tenant_context, tenant_a, tenant_b):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))
        tenant_context.tenant_id = tenant_b.id

        space.name = "Hijacked"
        with pytest.raises(NotFoundError):
            repo.update(space)

    def test_update_of_detached_entity_merges(self, session_factory, clock, tenant_a):
        with session_factory() as session:
            space = Repository(Space, session).create(new_space(tenant_a))
        later = clock.advance(hours=1)

        space.name = "Cabin"
        with session_factory() as session:
            merged = Repository(Space, session).update(space)

            assert merged is not space
            assert merged.name == "Cabin"
            assert merged.updated_at == later


class TestSoftDelete:
    """Tests for soft delete and administrative recovery."""

    def test_soft_delete_hides_entity(self, db_session, tenant_a):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))

        assert repo.soft_delete(space.id) is True

        assert space.is_deleted
        assert space.deleted_at == FIXED_NOW
        assert repo.get(space.id) is None
        assert repo.list() == []

    def test_second_soft_delete_returns_false(self, db_session, tenant_a):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))

        assert repo.soft_delete(space.id) is True
        assert repo.soft_delete(space.id) is False
        assert repo.soft_delete(uuid.uuid4()) is False

    def test_soft_delete_out_of_scope_returns_false(self, db_session, tenant_context, tenant_a, tenant_b):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))
        tenant_context.tenant_id = tenant_b.id

        assert repo.soft_delete(space.id) is False
        tenant_context.tenant_id = tenant_a.id
        assert repo.get(space.id) is space

    def test_soft_deleted_entity_is_recoverable_by_admin(self, db_session, tenant_a):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))
        repo.soft_delete(space.id)

        recovered = repo.get_including_deleted(space.id)
        assert recovered is space
        assert recovered.deleted_at == FIXED_NOW

    def test_list_deleted_keeps_tenant_visibility(self, db_session, tenant_context, tenant_a, tenant_b):
        repo = Repository(Space, db_session)
        mine = repo.create(new_space(tenant_a, "Mine"))
        theirs = repo.create(new_space(tenant_b, "Theirs"))
        repo.create(new_space(tenant_a, "Alive"))
        repo.soft_delete(mine.id)
        repo.soft_delete(theirs.id)

        tenant_context.tenant_id = tenant_a.id
        assert [space.name for space in repo.list_deleted()] == ["Mine"]

        tenant_context.tenant_id = None
        assert {space.name for space in repo.list_deleted()} == {"Mine", "Theirs"}

    def test_deleted_at_cannot_be_cleared(self, db_session, tenant_a):
        repo = Repository(Space, db_session)
        space = repo.create(new_space(tenant_a))
        repo.soft_delete(space.id)

        with pytest.raises(ValueError):
            space.deleted_at = None

    def test_soft_delete_commit_failure(self, db_session, tenant_a):
        repo = Repository(ShoppingList, db_session)
        space = make_space(db_session, tenant_a)
        shopping_list = repo.create(ShoppingList(space_id=space.id, name="Groceries", normalized_name="GROCERIES"))

        with patch("organizer.persistence.session.safe_commit", side_effect=RuntimeError("disk full")):
            with pytest.raises(CommitError) as exc_info:
                repo.soft_delete(shopping_list.id)

        assert exc_info.value.operation == "soft delete ShoppingList"
        db_session.rollback()
        assert repo.get(shopping_list.id) is not None


class TestUnitOfWork:
    """Tests for the unit_of_work context manager."""

    def test_commits_on_success(self, session_factory, tenant_a):
        with unit_of_work(session_factory) as session:
            session.add(new_space(tenant_a, "Committed"))

        with session_factory() as session:
            assert [space.name for space in Repository(Space, session).list()] == ["Committed"]

    def test_rolls_back_on_error(self, session_factory, tenant_a):
        with pytest.raises(RuntimeError):
            with unit_of_work(session_factory) as session:
                session.add(new_space(tenant_a, "Lost"))
                session.flush()
                raise RuntimeError("handler failed")

        with session_factory() as session:
            assert Repository(Space, session).list() == []
            assert change_log_rows(session)[-1].entity_type == ChangeLogEntityType.TENANT
