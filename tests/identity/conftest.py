import pytest


@pytest.fixture(autouse=True)
def _ctx(domain_ctx):
    yield
