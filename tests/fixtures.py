# tests/fixtures.py
import unittest
import sys
import os
from typing import Any, Callable, Dict, List, Optional, Set, Tuple

# Get the absolute path to the project root (one level up from tests/)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))

# Insert root into sys.path so we can import 'runegather'
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from runegather.catalog import Catalog
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.journal import Journal
from runegather.core.scheduler import Scheduler
from runegather.errors import DiscoveryFailure
from runegather.gathering.controller import GatherSessionController
from runegather.gathering.discovery import DiscoveryGateway, DiscoveryResult
from runegather.models import Element, Resource
from runegather.utils.logger import Logger, LogLevel

FIRE, WATER, EARTH, AIR, LIGHT = "1", "2", "3", "4", "5"


class FakeDiscoveryGateway(DiscoveryGateway):
    """
    Records every call. Resource ids in fail_ids get success=False; ids in
    raise_ids raise a transport error and ids in refuse_ids a DiscoveryFailure.
    fail_next makes only the next N calls fail.
    """

    def __init__(self):
        self.calls: List[Tuple[str, str]] = []
        self.fail_ids: Set[str] = set()
        self.raise_ids: Set[str] = set()
        self.refuse_ids: Set[str] = set()
        self.fail_next = 0

    def discover(self, resource_id: str, character_id: str) -> DiscoveryResult:
        self.calls.append((resource_id, character_id))
        if resource_id in self.raise_ids:
            raise ConnectionError("gateway unreachable")
        if resource_id in self.refuse_ids:
            raise DiscoveryFailure("character is too far away", resource_id)
        if self.fail_next > 0:
            self.fail_next -= 1
            return DiscoveryResult(False, "server said no")
        if resource_id in self.fail_ids:
            return DiscoveryResult(False, "server said no")
        return DiscoveryResult(True)

    def calls_for(self, resource_id: str) -> int:
        return sum(1 for rid, _ in self.calls if rid == resource_id)


def make_catalog(discovered: Tuple[str, ...] = ()) -> Catalog:
    elements = [
        Element(FIRE, "Fire", "F", "#f00"),
        Element(WATER, "Water", "W", "#00f"),
        Element(EARTH, "Earth", "E", "#850"),
        Element(AIR, "Air", "A", "#aff"),
        Element(LIGHT, "Light", "L", "#ff0"),
    ]
    resources = [
        Resource("r1", {"name": "Iron Ore", "rarity": "common", "element_combination": [FIRE, EARTH]}),
        Resource("r2", {"name": "Riverweed", "rarity": "common", "element_combination": [WATER, EARTH]}),
        Resource("r3", {"name": "Storm Crystal", "rarity": "uncommon", "element_combination": [AIR, WATER, LIGHT]}),
        Resource("r4", {"name": "Emberbloom", "rarity": "rare", "element_combination": [FIRE, FIRE, LIGHT]}),
        Resource("r5", {"name": "Glowmoss", "rarity": "epic", "element_combination": [LIGHT, EARTH]}),
    ]
    for resource in resources:
        if resource.resource_id in discovered:
            resource.mark_discovered()
    return Catalog(elements, resources)


class EventRecorder:
    def __init__(self, event_system: EventSystem, *event_types: str):
        self.received: List[Tuple[str, Any]] = []
        for event_type in event_types:
            event_system.subscribe(event_type, self)

    def __call__(self, event_type: str, data: Any):
        self.received.append((event_type, data))

    def of(self, event_type: str) -> List[Any]:
        return [data for et, data in self.received if et == event_type]


class GatheringTestBase(unittest.TestCase):
    """Base class for gathering tests: a controller on a fake clock and gateway."""

    discovered: Tuple[str, ...] = ()
    failure_policy = "skip"

    def setUp(self):
        Logger.set_level(LogLevel.CRITICAL)
        self.event_system = EventSystem()
        self.scheduler = Scheduler()
        self.gateway = FakeDiscoveryGateway()
        self.journal = Journal(self.event_system)
        self.catalog = make_catalog(self.discovered)
        self.controller = GatherSessionController(
            self.event_system, self.scheduler, self.gateway, "hero",
            catalog=self.catalog, failure_policy=self.failure_policy)
        self.timer = self.controller.timer
        self.session = self.controller.session
        self.auto = self.controller.auto_gather
        self.recorder = EventRecorder(self.event_system, *[
            events.GATHER_STARTED, events.GATHER_PROGRESS, events.GATHER_COMPLETED,
            events.GATHER_FAILED, events.GATHER_STOPPED, events.ELEMENT_REVEALED,
            events.AUTO_GATHER_STARTED, events.AUTO_GATHER_STOPPED,
            events.AUTO_GATHER_RESOURCE_GATHERED, events.AUTO_GATHER_CYCLE_COMPLETED,
            events.NOTICE,
        ])

    def tearDown(self):
        Logger.set_level(LogLevel.INFO)

    def resource(self, resource_id: str) -> Resource:
        found = self.catalog.get_resource(resource_id)
        if found is None:
            self.fail(f"Fixture resource {resource_id} missing")
        return found

    def advance(self, ms: int, step: int = 100):
        """Advance the fake clock in frame-sized steps."""
        remaining = ms
        while remaining > 0:
            dt = min(step, remaining)
            self.scheduler.update(dt)
            remaining -= dt

    def run_until(self, predicate: Callable[[], bool], max_ms: int = 30000, step: int = 50) -> int:
        """Advance until predicate() holds; fails the test after max_ms. Returns the time spent."""
        spent = 0
        while not predicate():
            if spent >= max_ms:
                self.fail(f"Condition not reached within {max_ms} ms")
            self.scheduler.update(step)
            spent += step
        return spent

    def notices(self) -> List[str]:
        return [data["message"] for data in self.recorder.of(events.NOTICE)]

    def state(self) -> Dict[str, Any]:
        return self.controller.get_state()
