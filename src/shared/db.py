"""Relational schema management shared by every domain.

Only SQL-backed providers (sqlite, postgresql) have a schema to manage; the
memory provider used in development and tests is skipped.
"""

from protean.domain import Domain
from sqlalchemy import create_engine

_SQL_PROVIDERS = ("sqlite", "postgresql")


def _sql_providers(domain: Domain):
    for _, provider in domain.providers.items():
        if provider.conn_info["provider"] in _SQL_PROVIDERS:
            yield provider


def _register_models(domain: Domain, provider) -> None:
    # Touching ``_dao`` makes the provider build the SQLAlchemy model for the
    # class, which is what puts its table into ``provider._metadata``.
    registries = (domain.registry.aggregates, domain.registry.entities, domain.registry.projections)
    for registry in registries:
        for _, record in registry.items():
            if record.cls.meta_.provider == provider.name:
                domain.repository_for(record.cls)._dao  # noqa: B018


def setup_db(domain: Domain) -> None:
    """Create the tables for every persisted class of ``domain``."""
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            provider._metadata.create_all(create_engine(provider.conn_info["database_uri"]))


def drop_db(domain: Domain) -> None:
    with domain.domain_context():
        for provider in _sql_providers(domain):
            _register_models(domain, provider)
            provider._metadata.drop_all(create_engine(provider.conn_info["database_uri"]))
