# runegather/catalog/provider.py
import json
import os
from typing import Any, Dict, List, Optional

from runegather.catalog.catalog import Catalog
from runegather.config import DATA_DIR, ELEMENTS_FILE, RESOURCES_FILE
from runegather.errors import CatalogUnavailable
from runegather.models import Element, Resource
from runegather.utils.logger import Logger


class CatalogProvider:
    """Supplies the elements and the resources of a character's current location."""

    def load(self, character_id: str, location_id: Optional[str] = None) -> Catalog:
        raise NotImplementedError


class JsonCatalogProvider(CatalogProvider):
    """
    Reads the catalog from two JSON files in a data directory.

    elements.json:  {"elements": [{"id", "name", "icon", "color", "is_active"}]}
    resources.json: {"resources": [{"id", "name", "rarity", "element_combination",
                                    "discovered", "location_ids", "is_active"}],
                     "discovered": {"<character_id>": ["<resource_id>", ...]}}

    The optional "discovered" map marks resources as already discovered per character,
    on top of any "discovered" flag carried by the record itself.
    """

    def __init__(self, data_dir: str = DATA_DIR):
        self.data_dir = data_dir

    def load(self, character_id: str, location_id: Optional[str] = None) -> Catalog:
        elements_data = self._read_json(ELEMENTS_FILE)
        resources_data = self._read_json(RESOURCES_FILE)

        elements = [Element.from_dict(e) for e in self._active(elements_data.get("elements", []), "element")]
        element_ids = {e.element_id for e in elements}

        known_for_character = {str(r) for r in resources_data.get("discovered", {}).get(str(character_id), [])}
        resources: List[Resource] = []
        for record in self._active(resources_data.get("resources", []), "resource"):
            resource = Resource(record["id"], record)
            if not resource.required_combination:
                Logger.warning("CatalogProvider", f"Skipping resource {resource.resource_id}: it has no element combination.")
                continue
            if location_id is not None and resource.location_ids and str(location_id) not in resource.location_ids:
                continue
            if resource.resource_id in known_for_character:
                resource.mark_discovered()

            unknown = [el for el in resource.required_combination if el not in element_ids]
            if unknown:
                Logger.warning("CatalogProvider", f"Resource {resource.resource_id} requires unknown elements {unknown}.")
            resources.append(resource)

        Logger.debug("CatalogProvider", f"Loaded {len(elements)} elements and {len(resources)} resources for character {character_id}.")
        return Catalog(elements, resources)

    def _read_json(self, filename: str) -> Dict[str, Any]:
        path = os.path.join(self.data_dir, filename)
        if not os.path.exists(path):
            raise CatalogUnavailable(f"Catalog file not found: {path}")
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise CatalogUnavailable(f"Could not read {path}: {e}") from e

    @staticmethod
    def _active(records: List[Dict[str, Any]], kind: str) -> List[Dict[str, Any]]:
        active = []
        for record in records:
            if "id" not in record:
                Logger.warning("CatalogProvider", f"Skipping {kind} record without an id: {record}")
                continue
            if record.get("is_active", True):
                active.append(record)
        return active
