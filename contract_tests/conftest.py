"""
Fixtures for the live contract suites.

These run against a real catalog deployment selected by CATALOG_API_BASE_URL
(see travel_catalog_contracts/config.py). Run them explicitly:

    pytest contract_tests

Each test module is one suite: it logs in once in its own setup and keeps a
module-scoped SuiteContext. Modules and the tests inside them are numbered
because they depend on each other's side effects and must run in order.
"""
import pytest

from travel_catalog_contracts.auth import AuthenticationError, authenticate
from travel_catalog_contracts.config import load_config
from travel_catalog_contracts.context import SuiteContext
from travel_catalog_contracts.http_client import CatalogHttpClient
from travel_catalog_contracts.resources import CatalogApi
from travel_catalog_contracts.scenarios import ScenarioSession


@pytest.fixture(scope='session')
def harness_config():
    """Configuration for the deployment under test."""
    config = load_config()
    print(f"[CONFIG] Catalog API at {config.base_url} as {config.credentials.email}")
    return config


@pytest.fixture(scope='session')
def catalog_client(harness_config):
    with CatalogHttpClient(harness_config.base_url, harness_config.timeout) as client:
        yield client


@pytest.fixture(scope='module')
def token(catalog_client, harness_config):
    """Fresh login for every suite; a failed login aborts the whole module."""
    try:
        return authenticate(catalog_client, harness_config.credentials)
    except AuthenticationError as e:
        pytest.fail(f"Suite setup aborted: {e}", pytrace=False)


@pytest.fixture(scope='module')
def suite_context(request):
    context = SuiteContext(request.module.__name__.rsplit(".", 1)[-1])
    yield context
    for kind in ("category", "destination"):
        for name, resource_id in context.created(kind):
            print(f"⚠️ left on server: {kind} '{name}' ({resource_id})")


@pytest.fixture
def session(catalog_client, token, suite_context):
    return ScenarioSession(api=CatalogApi(catalog_client), token=token, context=suite_context)
