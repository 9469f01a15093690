"""
Property-based testing with Hypothesis.

Each database example builds and drops its own schema, so examples never
see each other's rows.
"""

import re
from contextlib import contextmanager
from datetime import timedelta

import pytest
from hypothesis import HealthCheck, given, settings, strategies as st

from organizer.models import Base, ChangeLogEntityType, Space, SpaceType, Tenant
from organizer.persistence.change_types import get_entity_type, get_model_class
from organizer.persistence.repository import Repository
from organizer.persistence.session import create_session_factory
from organizer.validation.arguments import ArgumentView
from organizer.validation.validators import SLUG_PATTERN, _valid_slug
from tests.conftest import FIXED_NOW, FixedClock, SwitchableTenantContext, engine, make_tenant

identifiers = st.from_regex(r"[a-z]{1,8}(_[a-z]{1,8}){0,3}", fullmatch=True)
slugs = st.from_regex(r"[a-z0-9]{1,6}(-[a-z0-9]{1,6}){0,3}", fullmatch=True)


def camel_case(snake: str) -> str:
    head, *rest = snake.split("_")
    return head + "".join(part.capitalize() for part in rest)


@contextmanager
def fresh_database(clock, tenant_context):
    Base.metadata.create_all(bind=engine)
    try:
        factory = create_session_factory(engine, clock=clock, tenant_context=tenant_context)
        with factory() as session:
            yield session
    finally:
        Base.metadata.drop_all(bind=engine)


class TestArgumentViewProperties:
    """Property-based tests for argument lookup."""

    @given(key=identifiers, value=st.integers())
    def test_snake_and_camel_keys_resolve_alike(self, key, value):
        """Property: a camelCase lookup finds a snake_case argument and vice versa."""
        assert ArgumentView({key: value}).required(camel_case(key)) == value
        assert ArgumentView({camel_case(key): value}).required(key) == value

    @given(key=identifiers, value=st.text())
    def test_case_does_not_matter(self, key, value):
        assert ArgumentView({key.upper(): value}).optional(camel_case(key)) == value


class TestSlugProperties:
    """Property-based tests for the slug rule."""

    @given(slug=slugs)
    def test_well_formed_slugs_are_accepted(self, slug):
        assert _valid_slug(slug) == slug

    @given(text=st.text(alphabet="abz09-_A \n", max_size=12))
    def test_rule_accepts_only_hyphen_separated_words(self, text):
        """Property: lowercase alphanumeric words joined by single hyphens, nothing else."""
        words = text.split("-")
        expected = all(word and re.fullmatch(r"[a-z0-9]+", word) for word in words)

        try:
            _valid_slug(text)
            accepted = True
        except ValueError:
            accepted = False
        assert accepted == expected

    @given(slug=slugs)
    def test_trailing_newline_is_rejected(self, slug):
        assert SLUG_PATTERN.fullmatch(slug)
        with pytest.raises(ValueError):
            _valid_slug(slug + "\n")


class TestRegistryProperties:
    """Property-based tests for the change-type registry."""

    @given(entity_type=st.sampled_from(list(ChangeLogEntityType)))
    def test_round_trip(self, entity_type):
        assert get_entity_type(get_model_class(entity_type)) is entity_type


class TestVisibilityProperties:
    """Property-based tests for tenant and soft delete visibility."""

    @given(
        spaces=st.lists(st.tuples(st.integers(0, 2), st.booleans()), max_size=8),
        caller=st.one_of(st.none(), st.integers(0, 2)),
    )
    @settings(max_examples=25, deadline=None, suppress_health_check=[HealthCheck.too_slow])
    def test_visible_spaces(self, spaces, caller):
        """Property: a caller sees exactly the live spaces of its tenant (all, with no tenant)."""
        tenant_context = SwitchableTenantContext()

        with fresh_database(FixedClock(), tenant_context) as session:
            tenants = [make_tenant(session, f"tenant-{index}") for index in range(3)]
            repo = Repository(Space, session)
            expected = set()
            for position, (owner, deleted) in enumerate(spaces):
                space = repo.create(Space(
                    tenant_id=tenants[owner].id,
                    name=f"Space {position}",
                    normalized_name=f"SPACE {position}",
                    space_type=SpaceType.PERSONAL,
                ))
                if deleted:
                    repo.soft_delete(space.id)
                elif caller is None or caller == owner:
                    expected.add(space.id)

            tenant_context.tenant_id = None if caller is None else tenants[caller].id

            assert {space.id for space in repo.list()} == expected
            assert repo.count() == len(expected)

    @given(minutes=st.integers(min_value=0, max_value=60 * 24 * 365))
    @settings(max_examples=20, deadline=None)
    def test_audit_stamps_follow_clock(self, minutes):
        """Property: a new entity is stamped with the clock's instant."""
        clock = FixedClock(FIXED_NOW + timedelta(minutes=minutes))

        with fresh_database(clock, SwitchableTenantContext()) as session:
            tenant = Repository(Tenant, session).create(Tenant(name="Acme", slug="acme"))

            assert tenant.created_at == tenant.updated_at == clock.now()
