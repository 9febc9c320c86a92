"""Testing helpers."""

from contextlib import contextmanager

from sqlalchemy import create_engine

from ..credentials import CredentialStore


@contextmanager
def temporary_db(database_url: str = 'sqlite:///:memory:',
                 create: bool = True, drop: bool = True):
    """Provide a :class:`.CredentialStore` on a throwaway database."""
    engine = create_engine(database_url)
    store = CredentialStore(engine)
    if create:
        store.create_all()
    try:
        yield store
    finally:
        if drop:
            store.drop_all()
        engine.dispose()
