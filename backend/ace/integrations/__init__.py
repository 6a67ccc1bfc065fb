"""Outbound adapters: CKAN catalog and Orion-LD context broker."""

from ace.integrations.base import IntegrationResult
from ace.integrations.ckan import CkanAdapter
from ace.integrations.orion import OrionPublisher

__all__ = ["CkanAdapter", "IntegrationResult", "OrionPublisher"]
