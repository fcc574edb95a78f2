from __future__ import annotations

import logging

from invoicer.models.client import Client
from invoicer.repositories.base import ClientRepository

logger = logging.getLogger(__name__)


class ClientService:
    def __init__(self, repo: ClientRepository) -> None:
        self.repo = repo

    def create_client(self, client_name: str, client_address: str, contact_number: str, email: str) -> Client:
        client = Client(
            client_name=client_name.strip(),
            client_address=client_address.strip(),
            contact_number=contact_number.strip(),
            email=email.strip(),
        )
        result = self.repo.create(client)
        logger.info("Client created: id=%s, name=%s", result.id, result.client_name)
        return result

    def list_clients(self) -> list[Client]:
        result = self.repo.list_all()
        logger.debug("Listed %d clients", len(result))
        return result

    def search_clients(self, query: str) -> list[Client]:
        query = query.strip()
        if not query:
            return self.repo.list_all()
        result = self.repo.search(query)
        logger.debug("search_clients query=%r matched=%d", query, len(result))
        return result

    def get_client(self, client_id: str) -> Client | None:
        result = self.repo.get_by_id(client_id)
        logger.debug("get_client id=%s found=%s", client_id, result is not None)
        return result

    def update_client(self, client: Client) -> Client:
        # Re-run field validation on a model that may have been mutated in place.
        Client.model_validate(client.model_dump())
        result = self.repo.update(client)
        logger.info("Client updated: id=%s, name=%s", result.id, result.client_name)
        return result

    def delete_client(self, client_id: str) -> None:
        """Existing invoices keep their own snapshot of the client."""
        self.repo.delete(client_id)
        logger.info("Client %s deleted", client_id)
