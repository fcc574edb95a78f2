from abc import ABC, abstractmethod

from invoicer.models.client import Client
from invoicer.models.company import CompanyProfile
from invoicer.models.invoice import Invoice, InvoiceStatus


class CompanyProfileRepository(ABC):
    @abstractmethod
    def create(self, profile: CompanyProfile) -> CompanyProfile: ...

    @abstractmethod
    def get_by_id(self, profile_id: str) -> CompanyProfile | None: ...

    @abstractmethod
    def list_all(self) -> list[CompanyProfile]: ...

    @abstractmethod
    def update(self, profile: CompanyProfile) -> CompanyProfile: ...

    @abstractmethod
    def delete(self, profile_id: str) -> None: ...


class ClientRepository(ABC):
    @abstractmethod
    def create(self, client: Client) -> Client: ...

    @abstractmethod
    def get_by_id(self, client_id: str) -> Client | None: ...

    @abstractmethod
    def list_all(self) -> list[Client]: ...

    @abstractmethod
    def search(self, query: str) -> list[Client]: ...

    @abstractmethod
    def update(self, client: Client) -> Client: ...

    @abstractmethod
    def delete(self, client_id: str) -> None: ...


class InvoiceRepository(ABC):
    @abstractmethod
    def create(self, invoice: Invoice) -> Invoice: ...

    @abstractmethod
    def get_by_id(self, invoice_id: str) -> Invoice | None: ...

    @abstractmethod
    def list_all(self) -> list[Invoice]: ...

    @abstractmethod
    def list_by_status(self, status: InvoiceStatus) -> list[Invoice]: ...

    @abstractmethod
    def list_by_client(self, client_id: str) -> list[Invoice]: ...

    @abstractmethod
    def update(self, invoice: Invoice) -> Invoice: ...

    @abstractmethod
    def update_status(self, invoice_id: str, status: InvoiceStatus) -> None: ...

    @abstractmethod
    def update_pdf_path(self, invoice_id: str, pdf_path: str) -> None: ...

    @abstractmethod
    def delete(self, invoice_id: str) -> None: ...

    @abstractmethod
    def next_invoice_counter(self, start: int) -> int: ...
