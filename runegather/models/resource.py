# runegather/models/resource.py
from typing import Any, Dict, List

from runegather.config import DEFAULT_RARITY, RARITY_LABELS, RESOURCE_RARITIES
from runegather.utils.logger import Logger


class Resource:
    def __init__(self, resource_id: Any, data: Dict[str, Any]):
        self.resource_id = str(resource_id)
        self.name = data.get("name", "Unknown Resource")
        self.description = data.get("description", "")
        self.icon = data.get("icon", "")

        rarity = data.get("rarity", DEFAULT_RARITY)
        if rarity not in RESOURCE_RARITIES:
            Logger.warning("Resource", f"Unknown rarity '{rarity}' on {self.resource_id}, using {DEFAULT_RARITY}.")
            rarity = DEFAULT_RARITY
        self.rarity: str = rarity

        # The API sends numeric ids under "element_combination"; ids are compared as strings.
        combination = data.get("element_combination")
        if combination is None:
            combination = data.get("elementCombination", [])
        self._required_combination: List[str] = [str(el) for el in combination or []]

        self.location_ids: List[str] = [str(loc) for loc in data.get("location_ids", [])]
        self._discovered = bool(data.get("discovered", False))

    @property
    def required_combination(self) -> List[str]:
        # A copy, so callers can never rewrite the combination of a loaded resource
        return list(self._required_combination)

    @property
    def discovered(self) -> bool:
        return self._discovered

    def mark_discovered(self) -> bool:
        """Flip discovered to True. Returns True only on the first call."""
        if self._discovered:
            return False
        self._discovered = True
        return True

    @property
    def rarity_label(self) -> str:
        return RARITY_LABELS.get(self.rarity, self.rarity.title())

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.resource_id,
            "name": self.name,
            "description": self.description,
            "icon": self.icon,
            "rarity": self.rarity,
            "element_combination": self.required_combination,
            "discovered": self._discovered,
            "location_ids": list(self.location_ids),
        }

    def __repr__(self) -> str:
        return f"<Resource {self.resource_id} '{self.name}' {'discovered' if self._discovered else 'hidden'}>"
