from sqlalchemy import Connection

from invoicer.repositories.base import (
    ClientRepository,
    CompanyProfileRepository,
    InvoiceRepository,
)


def get_company_profile_repository(conn: Connection) -> CompanyProfileRepository:
    from invoicer.repositories.sqlalchemy import SQLAlchemyCompanyProfileRepository

    return SQLAlchemyCompanyProfileRepository(conn)


def get_client_repository(conn: Connection) -> ClientRepository:
    from invoicer.repositories.sqlalchemy import SQLAlchemyClientRepository

    return SQLAlchemyClientRepository(conn)


def get_invoice_repository(conn: Connection) -> InvoiceRepository:
    from invoicer.repositories.sqlalchemy import SQLAlchemyInvoiceRepository

    return SQLAlchemyInvoiceRepository(conn)
