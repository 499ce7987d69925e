"""
Shared fixtures and step definitions for BDD tests.

- runner, desk, context: available to all scenario files in this directory
- desk: the CLI's services rebuilt over the in-memory FakeDatabase, so
  scenarios exercise the real workflow end to end without Postgres
- no_logging: autouse, prevents log file creation during tests
- 'the output contains' / 'the command fails' steps: shared across feature files
"""

import pytest
from unittest.mock import patch
from click.testing import CliRunner
from pytest_bdd import then, parsers

from supportdesk.engine.clients import ClientService
from supportdesk.engine.contacts import ContactService


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def desk(db, event_bus):
    """Point the CLI at services backed by the fake database; yields the database."""
    contacts = ContactService(transaction=db.transaction, stores=db.stores, event_bus=event_bus)
    clients = ClientService(transaction=db.transaction, stores=db.stores, event_bus=event_bus)
    with patch("supportdesk.cli.main.contact_service", contacts), \
         patch("supportdesk.cli.main.client_service", clients):
        yield db


@pytest.fixture
def context():
    """Mutable dict shared between Given/When/Then steps within a scenario."""
    return {}


@pytest.fixture(autouse=True)
def no_logging():
    with patch("supportdesk.cli.main.configure_logging"):
        yield


@then(parsers.parse('the output contains "{text}"'))
def output_contains(context, text):
    assert text in context["result"].output, (
        f"Expected {text!r} in output:\n{context['result'].output}"
    )


@then("the command fails")
def command_fails(context):
    assert context["result"].exit_code != 0
