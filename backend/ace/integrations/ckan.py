"""
CkanAdapter: translates the RESTful dataset surface into CKAN Action API calls.

When CKAN_BASE_URL is not configured the adapter answers 202 with the
payload it would have sent, so the prototype works without a catalog.
"""

from __future__ import annotations

from typing import Any

import httpx

from ace.core.config import settings
from ace.core.constants import CkanAction
from ace.core.errors import IntegrationError
from ace.core.logging import get_logger
from ace.integrations.base import IntegrationResult, build_client

logger = get_logger(__name__)


class CkanAdapter:
    """Thin CKAN Action API client bound to one ckanext-scheming schema."""

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        schema_id: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = (base_url if base_url is not None else settings.CKAN_BASE_URL).rstrip("/")
        self.api_key = api_key if api_key is not None else settings.CKAN_API_KEY
        self.schema_id = schema_id or settings.CKAN_SCHEMA_ID
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    # ─── Translation ───────────────────────────────────

    @staticmethod
    def map_rest_to_action(method: str, path: str) -> CkanAction | None:
        """Map a REST method/path on /v1/datasets to its CKAN action."""
        method = method.upper()
        if method == "POST" and path.endswith("/resources"):
            return CkanAction.RESOURCE_CREATE
        if method == "POST" and path.rstrip("/") == "/v1/datasets":
            return CkanAction.PACKAGE_CREATE
        if method == "GET" and path.startswith("/v1/datasets/"):
            return CkanAction.PACKAGE_SHOW
        return None

    def translate_dataset_payload(self, rest_payload: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": rest_payload.get("name"),
            "title": rest_payload.get("title") or rest_payload.get("name"),
            "owner_org": rest_payload.get("organization"),
            "schema_id": self.schema_id,
            "extras": [
                {"key": "localGovernmentCode", "value": rest_payload.get("localGovernmentCode")},
                {"key": "datasetUpdatedAt", "value": rest_payload.get("datasetUpdatedAt")},
            ],
            "resources": [
                self._resource_fields(resource)
                for resource in rest_payload.get("resources") or []
            ],
        }

    def translate_resource_payload(self, dataset_id: str, resource: dict[str, Any]) -> dict[str, Any]:
        return {"package_id": dataset_id, **self._resource_fields(resource)}

    @staticmethod
    def _resource_fields(resource: dict[str, Any]) -> dict[str, Any]:
        return {
            "name": resource.get("name"),
            "url": resource.get("url"),
            "format": resource.get("format"),
            "schema": resource.get("schema"),
        }

    # ─── Response handling ─────────────────────────────

    @staticmethod
    def map_error_status(error: Any) -> int:
        if not isinstance(error, dict) or not error.get("__type"):
            return 400
        if error["__type"] == "Authorization Error":
            return 403
        if error["__type"] == "Not Found Error":
            return 404
        return 400

    def normalize_response(self, action: str, http_status: int | None, json_body: Any) -> IntegrationResult:
        if json_body is None:
            return IntegrationResult(
                status_code=http_status or 502,
                body={"error": "No CKAN response", "action": action},
            )

        if isinstance(json_body, dict) and json_body.get("success") is False:
            return IntegrationResult(
                status_code=self.map_error_status(json_body.get("error")),
                body={"error": json_body.get("error") or "CKAN error", "action": action},
            )

        status_code = http_status if http_status and http_status >= 400 else 200
        result = json_body.get("result") if isinstance(json_body, dict) else None
        return IntegrationResult(status_code=status_code, body=result or json_body)

    # ─── Calls ─────────────────────────────────────────

    async def call_action(self, action: str, payload: dict[str, Any]) -> IntegrationResult:
        if not self.base_url:
            logger.info("CKAN not configured, simulating action", action=action)
            return IntegrationResult(
                status_code=202,
                body={
                    "message": "CKAN_BASE_URL not configured. Action simulated for prototype.",
                    "action": action,
                    "payload": payload,
                },
            )

        url = f"{self.base_url}/api/3/action/{action}"
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["Authorization"] = self.api_key

        logger.info("Calling CKAN action", action=action, url=url)
        try:
            async with build_client(self._timeout, self._transport) as client:
                response = await client.post(url, headers=headers, json=payload)
        except httpx.HTTPError as exc:
            raise IntegrationError(f"CKAN request failed: {exc}", service="ckan") from exc

        try:
            json_body = response.json()
        except ValueError:
            json_body = None

        result = self.normalize_response(action, response.status_code, json_body)
        logger.info("CKAN action finished", action=action, status_code=result.status_code)
        return result

    async def create_dataset(self, rest_payload: dict[str, Any]) -> IntegrationResult:
        payload = self.translate_dataset_payload(rest_payload)
        return await self.call_action(CkanAction.PACKAGE_CREATE, payload)

    async def show_dataset(self, dataset_id: str) -> IntegrationResult:
        return await self.call_action(CkanAction.PACKAGE_SHOW, {"id": dataset_id})

    async def create_resource(self, dataset_id: str, resource: dict[str, Any]) -> IntegrationResult:
        payload = self.translate_resource_payload(dataset_id, resource)
        return await self.call_action(CkanAction.RESOURCE_CREATE, payload)
