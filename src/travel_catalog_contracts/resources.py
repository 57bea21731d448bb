"""Endpoint helpers for the catalog collections.

Each helper issues exactly one request and returns the raw `HttpExchange`;
nothing here interprets status codes.
"""
from __future__ import annotations

from typing import Any

from travel_catalog_contracts.auth import bearer_headers
from travel_catalog_contracts.http_client import CatalogHttpClient, HttpExchange


class ResourceEndpoint:
    """CRUD calls for one collection (`category`, `destination`)."""

    def __init__(self, client: CatalogHttpClient, collection: str):
        self.client = client
        self.collection = collection.strip("/")

    def item_path(self, resource_id: str) -> str:
        return f"{self.collection}/{resource_id}"

    def list(self) -> HttpExchange:
        return self.client.get(self.collection)

    def get(self, resource_id: str) -> HttpExchange:
        return self.client.get(self.item_path(resource_id))

    def create(self, token: str, payload: dict[str, Any]) -> HttpExchange:
        return self.client.post(self.collection, json_body=payload, headers=bearer_headers(token))

    def update(self, token: str, resource_id: str, payload: dict[str, Any]) -> HttpExchange:
        return self.client.put(self.item_path(resource_id), json_body=payload, headers=bearer_headers(token))

    def delete(self, token: str, resource_id: str) -> HttpExchange:
        return self.client.delete(self.item_path(resource_id), headers=bearer_headers(token))


class CatalogApi:
    """The two catalog collections behind one client."""

    def __init__(self, client: CatalogHttpClient):
        self.client = client
        self.categories = ResourceEndpoint(client, "category")
        self.destinations = ResourceEndpoint(client, "destination")
