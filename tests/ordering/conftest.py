import pytest
from protean.integrations.pytest import DomainFixture


@pytest.fixture(scope="session")
def ordering_bed():
    from ordering.domain import ordering

    bed = DomainFixture(ordering)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(ordering_bed):
    with ordering_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def identity_provider():
    """A fake identity provider with one customer, one stranger and one admin."""
    from ordering.identity import FakeIdentityProvider, set_identity_provider

    provider = FakeIdentityProvider()
    provider.register("customer-token", email="asha@example.com", role="customer", principal_id="cust-001")
    provider.register("stranger-token", email="ravi@example.com", role="customer", principal_id="cust-002")
    provider.register("admin-token", email="ops@example.com", role="admin", principal_id="admin-001")
    set_identity_provider(provider)
    return provider
