"""Shared fixtures: an offline ledger on an in-memory store."""

import pytest

from pocketledger.audit import AuditLogger
from pocketledger.config import LedgerSettings
from pocketledger.orchestrator import Ledger
from pocketledger.services.notifications import NotificationDispatcher
from pocketledger.services.storage import InMemoryStore, LedgerRepository


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def repository(store):
    return LedgerRepository(store)


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def ledger(repository, audit_logger):
    ledger = Ledger(
        repository,
        settings=LedgerSettings(entry_separator=".", week_start=6),
        audit_logger=audit_logger,
        dispatcher=NotificationDispatcher(audit_logger=audit_logger),
    )
    yield ledger
    ledger.close()
