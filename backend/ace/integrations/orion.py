"""
OrionPublisher: turns a validated record into an NGSI-LD entity and
POSTs it to an Orion-LD context broker.

Without ORION_LD_URL the entity is only prepared and returned (202).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Mapping

import httpx

from ace.core.config import settings
from ace.core.constants import FieldType
from ace.core.errors import IntegrationError
from ace.core.logging import get_logger
from ace.integrations.base import IntegrationResult, build_client
from ace.templates.models import Template

logger = get_logger(__name__)

_COORDINATE_TYPES = (FieldType.LATITUDE, FieldType.LONGITUDE)


class OrionPublisher:
    """Publishes records to the NGSI-LD entities endpoint."""

    def __init__(
        self,
        endpoint: str | None = None,
        service: str | None = None,
        service_path: str | None = None,
        context: list[str] | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = (endpoint if endpoint is not None else settings.ORION_LD_URL).rstrip("/")
        self.service = service or settings.FIWARE_SERVICE
        self.service_path = service_path or settings.FIWARE_SERVICEPATH
        self.context = context or list(settings.NGSI_LD_CONTEXT)
        self._timeout = timeout or settings.HTTP_TIMEOUT_SECONDS
        self._transport = transport

    @staticmethod
    def build_geo_property(latitude: float, longitude: float) -> dict[str, Any]:
        # GeoJSON order is [longitude, latitude]
        return {
            "type": "GeoProperty",
            "value": {
                "type": "Point",
                "coordinates": [float(longitude), float(latitude)],
            },
            "observedAt": datetime.now(timezone.utc).isoformat(),
        }

    def to_ngsi_entity(self, model_id: str, item: Mapping[str, Any], template: Template) -> dict[str, Any]:
        local_id = item.get("identifier") or item.get("id")
        entity: dict[str, Any] = {
            "id": f"urn:ace:{model_id}:{local_id}",
            "type": model_id.replace("-", "_"),
            "@context": self.context,
        }

        for definition in template.fields:
            if definition.type in _COORDINATE_TYPES:
                continue
            value = item.get(definition.field_key)
            if value is None:
                continue
            entity[definition.field_key] = {"type": "Property", "value": value}

        latitude = template.first_of_type(FieldType.LATITUDE)
        longitude = template.first_of_type(FieldType.LONGITUDE)
        if latitude and longitude:
            lat_value = item.get(latitude.field_key)
            lon_value = item.get(longitude.field_key)
            if lat_value is not None and lon_value is not None:
                entity["location"] = self.build_geo_property(lat_value, lon_value)

        return entity

    def _headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/ld+json",
            "Link": (
                f'<{self.context[0]}>; rel="http://www.w3.org/ns/json-ld#context"; '
                'type="application/ld+json"'
            ),
            "NGSILD-Tenant": self.service,
            "Fiware-Service": self.service,
            "Fiware-ServicePath": self.service_path,
        }

    async def publish(self, model_id: str, item: Mapping[str, Any], template: Template) -> IntegrationResult:
        entity = self.to_ngsi_entity(model_id, item, template)

        if not self.endpoint:
            logger.info("Orion-LD not configured, entity prepared only", entity_id=entity["id"])
            return IntegrationResult(
                status_code=202,
                body={
                    "message": "ORION_LD_URL not configured. NGSI-LD payload prepared only.",
                    "entity": entity,
                },
            )

        url = f"{self.endpoint}/ngsi-ld/v1/entities"
        logger.info("Publishing NGSI-LD entity", entity_id=entity["id"], url=url)
        try:
            async with build_client(self._timeout, self._transport) as client:
                response = await client.post(url, headers=self._headers(), json=entity)
        except httpx.HTTPError as exc:
            raise IntegrationError(f"Orion-LD request failed: {exc}", service="orion") from exc

        if response.is_error:
            logger.warning(
                "Orion-LD publish failed",
                entity_id=entity["id"],
                status_code=response.status_code,
            )
            return IntegrationResult(
                status_code=response.status_code,
                body={"error": "Orion-LD publish failed", "detail": response.text},
            )

        return IntegrationResult(status_code=201, body={"entityId": entity["id"]})
