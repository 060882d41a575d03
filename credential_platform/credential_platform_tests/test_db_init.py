"""Tests for database initialization and the credential store."""
import os
import tempfile

import pytest
from sqlalchemy import create_engine, inspect
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session
from unittest.mock import Mock

from credential_platform.credential_platform.credential_service.db import Base, init_db
from credential_platform.credential_platform.credential_service.errors import InsertionFailure, LookupFailure
from credential_platform.credential_platform.credential_service.store import CredentialStore, Identity


@pytest.fixture
def test_engine():
    with tempfile.NamedTemporaryFile(delete=False, suffix='.db') as tmp:
        tmp_db_path = tmp.name

    engine = create_engine(f"sqlite:///{tmp_db_path}", connect_args={"check_same_thread": False})
    try:
        yield engine
    finally:
        engine.dispose()
        if os.path.exists(tmp_db_path):
            os.unlink(tmp_db_path)


@pytest.fixture
def db_session(test_engine):
    Base.metadata.create_all(bind=test_engine)
    session = Session(bind=test_engine)
    yield session
    session.close()


def test_init_db_creates_users_table(test_engine):
    """init_db creates the users table with a unique, non-null email."""
    import credential_platform.credential_platform.credential_service.db as db_module
    original_engine = db_module.engine
    db_module.engine = test_engine
    try:
        init_db()
    finally:
        db_module.engine = original_engine

    inspector = inspect(test_engine)
    assert 'users' in inspector.get_table_names()

    columns = {col['name']: col for col in inspector.get_columns('users')}
    assert set(columns) == {'id', 'email', 'password_hash'}
    assert columns['email']['nullable'] is False
    assert columns['password_hash']['nullable'] is False

    unique_email = [idx for idx in inspector.get_indexes('users') if idx['column_names'] == ['email']]
    assert unique_email and unique_email[0]['unique']


def test_insert_and_fetch(db_session):
    store = CredentialStore(db_session)

    user_id = store.insert("a@x.com", "$pbkdf2-sha256$stored")
    record = store.fetch_by_email("a@x.com")

    assert record.identity == Identity(id=user_id, email="a@x.com")
    assert record.password_hash == "$pbkdf2-sha256$stored"


def test_fetch_unknown_email(db_session):
    assert CredentialStore(db_session).fetch_by_email("nobody@x.com") is None


def test_duplicate_email_is_insertion_failure(db_session):
    store = CredentialStore(db_session)
    store.insert("a@x.com", "hash-1")

    with pytest.raises(InsertionFailure):
        store.insert("a@x.com", "hash-2")

    # Session is usable again after the rollback
    assert store.insert("b@x.com", "hash-3") > 0


def test_list_identities(db_session):
    store = CredentialStore(db_session)
    first = store.insert("first@x.com", "hash-1")
    second = store.insert("second@x.com", "hash-2")

    assert store.list_identities() == [
        Identity(id=first, email="first@x.com"),
        Identity(id=second, email="second@x.com"),
    ]


def test_lookup_error_is_lookup_failure():
    session = Mock()
    session.query.side_effect = OperationalError("SELECT", {}, Exception("database is locked"))

    with pytest.raises(LookupFailure):
        CredentialStore(session).fetch_by_email("a@x.com")
    with pytest.raises(LookupFailure):
        CredentialStore(session).list_identities()
