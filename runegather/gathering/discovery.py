# runegather/gathering/discovery.py
from dataclasses import dataclass
from typing import Optional, Set, Tuple

from runegather.utils.logger import Logger


@dataclass
class DiscoveryResult:
    success: bool
    message: Optional[str] = None


class DiscoveryGateway:
    """
    Persists the fact that a character discovered a resource.

    One call is made per completed accumulation run. Implementations may raise
    on transport faults; the caller treats that as a failed discovery and never
    retries on its own. Calling again for an already discovered resource must be
    harmless.
    """

    def discover(self, resource_id: str, character_id: str) -> DiscoveryResult:
        raise NotImplementedError


class LocalDiscoveryGateway(DiscoveryGateway):
    """In-process gateway that just remembers which character discovered what."""

    def __init__(self):
        self.discoveries: Set[Tuple[str, str]] = set()

    def discover(self, resource_id: str, character_id: str) -> DiscoveryResult:
        key = (str(character_id), str(resource_id))
        if key in self.discoveries:
            return DiscoveryResult(True, "Resource already discovered.")
        self.discoveries.add(key)
        Logger.debug("LocalDiscoveryGateway", f"Character {character_id} discovered resource {resource_id}.")
        return DiscoveryResult(True, "Resource discovered.")

    def is_discovered(self, resource_id: str, character_id: str) -> bool:
        return (str(character_id), str(resource_id)) in self.discoveries
