"""Resolve community councils by name, creating them when absent."""

from typing import Optional
import logging

from retry import retry
from sqlalchemy import select

from .. import domain
from .credentials import CredentialStore, new_id, now
from .exceptions import Unavailable
from .models import DBCouncil

logger = logging.getLogger(__name__)

# Councils created from the registration form only carry a name.
PLACEHOLDER_PARISH = 'Valle Verde'
PLACEHOLDER_MUNICIPALITY = 'Municipio Ejemplo'
PLACEHOLDER_STATE = 'Estado Ejemplo'


class CouncilResolver(object):
    """Find-or-create access to :class:`.DBCouncil` rows."""

    def __init__(self, store: CredentialStore,
                 default_name: str = domain.DEFAULT_COUNCIL_NAME) -> None:
        self.store = store
        self.default_name = default_name

    @retry(Unavailable, tries=3, delay=0.5, backoff=2)
    def find_or_create(self, name: Optional[str] = None) -> str:
        """
        Get the identifier of the council called ``name``.

        If ``name`` is empty or omitted, the default council is used. A
        council that does not exist yet is created with placeholder values
        for its parish, municipality and state.

        Parameters
        ----------
        name : str or None

        Returns
        -------
        str
            The council identifier.

        """
        name = (name or '').strip() or self.default_name
        with self.store.transaction() as session:
            council_id = session.scalar(
                select(DBCouncil.council_id)
                .where(DBCouncil.name == name)
                .limit(1)
            )
            if council_id is not None:
                return str(council_id)

            created = now()
            db_council = DBCouncil(
                council_id=new_id(),
                name=name,
                parish=PLACEHOLDER_PARISH,
                municipality=PLACEHOLDER_MUNICIPALITY,
                state=PLACEHOLDER_STATE,
                created_at=created,
                updated_at=created
            )
            session.add(db_council)
            logger.info('Created council %s', db_council.council_id)
            return str(db_council.council_id)

    def get(self, council_id: str) -> Optional[domain.Council]:
        """Load a council by identifier."""
        with self.store.transaction() as session:
            db_council = session.get(DBCouncil, council_id)
            return db_council.to_domain() if db_council is not None else None
