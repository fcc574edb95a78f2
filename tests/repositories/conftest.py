import pytest
from sqlalchemy import Connection

from invoicer.repositories.sqlalchemy import (
    SQLAlchemyClientRepository,
    SQLAlchemyCompanyProfileRepository,
    SQLAlchemyInvoiceRepository,
)


@pytest.fixture()
def company_repo(db_connection: Connection) -> SQLAlchemyCompanyProfileRepository:
    return SQLAlchemyCompanyProfileRepository(db_connection)


@pytest.fixture()
def client_repo(db_connection: Connection) -> SQLAlchemyClientRepository:
    return SQLAlchemyClientRepository(db_connection)


@pytest.fixture()
def invoice_repo(db_connection: Connection) -> SQLAlchemyInvoiceRepository:
    return SQLAlchemyInvoiceRepository(db_connection)
