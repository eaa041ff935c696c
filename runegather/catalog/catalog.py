# runegather/catalog/catalog.py
from typing import Dict, Iterable, List, Optional

from runegather.models import Element, Resource


class Catalog:
    """
    Read-only view of the elements and resources available to one character.

    Order is preserved as supplied by the provider. The only mutation the core
    ever performs on catalog data is Resource.mark_discovered().
    """
    def __init__(self, elements: Iterable[Element] = (), resources: Iterable[Resource] = ()):
        self.elements: Dict[str, Element] = {}
        self.resources: Dict[str, Resource] = {}
        for element in elements:
            self.elements[element.element_id] = element
        for resource in resources:
            self.resources[resource.resource_id] = resource

    def is_empty(self) -> bool:
        return not self.resources

    def get_element(self, element_id) -> Optional[Element]:
        return self.elements.get(str(element_id))

    def get_resource(self, resource_id) -> Optional[Resource]:
        return self.resources.get(str(resource_id))

    def find_element(self, name_or_id: str) -> Optional[Element]:
        """Looks up by id first, then by case-insensitive name."""
        found = self.get_element(name_or_id)
        if found:
            return found
        wanted = name_or_id.strip().lower()
        for element in self.elements.values():
            if element.name.lower() == wanted:
                return element
        return None

    def find_resource(self, name_or_id: str) -> Optional[Resource]:
        found = self.get_resource(name_or_id)
        if found:
            return found
        wanted = name_or_id.strip().lower()
        for resource in self.resources.values():
            if resource.name.lower() == wanted:
                return resource
        return None

    def discovered_resources(self) -> List[Resource]:
        return [r for r in self.resources.values() if r.discovered]

    def element_names(self, element_ids: Iterable[str]) -> List[str]:
        names = []
        for element_id in element_ids:
            element = self.get_element(element_id)
            names.append(element.name if element else str(element_id))
        return names
