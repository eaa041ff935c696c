# runegather/gathering/auto_gather.py
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from runegather.catalog import Catalog
from runegather.config import (
    AUTO_GATHER_CYCLE_DELAY_MS, AUTO_GATHER_FAILURE_POLICIES, AUTO_GATHER_FAILURE_POLICY,
    AUTO_GATHER_MAX_RESOURCES, AUTO_GATHER_RESOURCE_DELAY_MS
)
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.scheduler import CancellationToken, Scheduler
from runegather.errors import ValidationError
from runegather.gathering.session import GatherSession
from runegather.models import Resource
from runegather.utils.logger import Logger


@dataclass
class AutoGatherStats:
    total_gathered: int = 0
    cycles_completed: int = 0
    per_resource_count: Dict[str, int] = field(default_factory=dict)

    def record(self, resource_id: str) -> None:
        self.per_resource_count[resource_id] = self.per_resource_count.get(resource_id, 0) + 1
        self.total_gathered += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_gathered": self.total_gathered,
            "cycles_completed": self.cycles_completed,
            "per_resource_count": dict(self.per_resource_count),
        }


class AutoGatherState:
    STOPPED = "stopped"
    RUNNING = "running"


class AutoGatherPhase:
    SELECTING = "selecting"    # revealing the current resource's elements
    GATHERING = "gathering"    # timer is accumulating
    ADVANCING = "advancing"    # waiting out the inter-resource / inter-cycle delay


class AutoGatherScheduler:
    """
    Gathers a player-chosen set of discovered resources over and over.

    Resources run strictly in the order they were added to the selection, and
    every cycle starts again from that order. Each pass reveals the resource's
    combination into the shared GatherSession, which starts the timer once the
    last element lands; a completed run bumps the stats and moves on to the next
    resource after a short pause.

    All delayed continuations of one run share a CancellationToken; stop()
    cancels it first, so whatever is pending at that moment does nothing when
    it fires.
    """

    def __init__(self, session: GatherSession, catalog: Catalog, scheduler: Scheduler,
                 event_system: EventSystem,
                 max_resources: int = AUTO_GATHER_MAX_RESOURCES,
                 resource_delay_ms: int = AUTO_GATHER_RESOURCE_DELAY_MS,
                 cycle_delay_ms: int = AUTO_GATHER_CYCLE_DELAY_MS,
                 failure_policy: str = AUTO_GATHER_FAILURE_POLICY):
        if failure_policy not in AUTO_GATHER_FAILURE_POLICIES:
            raise ValueError(f"Unknown failure policy '{failure_policy}'. Use one of {AUTO_GATHER_FAILURE_POLICIES}.")

        self.session = session
        self.catalog = catalog
        self.scheduler = scheduler
        self.event_system = event_system
        self.max_resources = max_resources
        self.resource_delay_ms = resource_delay_ms
        self.cycle_delay_ms = cycle_delay_ms
        self.failure_policy = failure_policy

        # Membership survives stop/start; everything below it is per run.
        self.selected_for_auto: List[str] = []

        self.state = AutoGatherState.STOPPED
        self.queue: List[Resource] = []
        self.original_order: List[Resource] = []
        self.current_resource: Optional[Resource] = None
        # Stats of the current run, or of the last one once stopped
        self.stats = AutoGatherStats()
        self._token: Optional[CancellationToken] = None

        event_system.subscribe(events.GATHER_COMPLETED, self._on_gather_completed)
        event_system.subscribe(events.GATHER_FAILED, self._on_gather_failed)

    @property
    def is_running(self) -> bool:
        return self.state == AutoGatherState.RUNNING

    @property
    def phase(self) -> Optional[str]:
        if not self.is_running:
            return None
        if self.session.running:
            return AutoGatherPhase.GATHERING
        if self.current_resource is not None:
            return AutoGatherPhase.SELECTING
        return AutoGatherPhase.ADVANCING

    # --- Membership ---

    def toggle_membership(self, resource_id: str) -> bool:
        resource_id = str(resource_id)
        if resource_id in self.selected_for_auto:
            self.selected_for_auto.remove(resource_id)
            self._publish_membership(resource_id, False)
            return True

        try:
            self._validate_new_member(resource_id)
        except ValidationError as e:
            self._notice(str(e))
            return False

        self.selected_for_auto.append(resource_id)
        self._publish_membership(resource_id, True)
        return True

    def is_member(self, resource_id: str) -> bool:
        return str(resource_id) in self.selected_for_auto

    def set_catalog(self, catalog: Catalog) -> None:
        """Swap the catalog, dropping members that are gone or not discovered in it."""
        if self.is_running:
            self.stop()
        self.catalog = catalog
        kept = []
        for resource_id in self.selected_for_auto:
            resource = catalog.get_resource(resource_id)
            if resource is not None and resource.discovered:
                kept.append(resource_id)
        self.selected_for_auto = kept

    def _validate_new_member(self, resource_id: str) -> None:
        resource = self.catalog.get_resource(resource_id)
        if resource is None:
            raise ValidationError(f"Unknown resource '{resource_id}'.")
        if not resource.discovered:
            raise ValidationError(f"{resource.name} must be discovered before it can be auto-gathered.")
        if not resource.required_combination:
            raise ValidationError(f"{resource.name} has no element combination and cannot be auto-gathered.")
        if len(self.selected_for_auto) >= self.max_resources:
            raise ValidationError(f"You cannot select more than {self.max_resources} resources for auto-gathering.")

    # --- Run control ---

    def start(self) -> bool:
        if self.is_running:
            return False
        try:
            order = self._build_order()
        except ValidationError as e:
            self._notice(str(e))
            return False

        token = CancellationToken()
        self._token = token
        self.original_order = order
        self.queue = list(order)
        self.stats = AutoGatherStats(per_resource_count={r.resource_id: 0 for r in order})
        self.state = AutoGatherState.RUNNING

        Logger.info("AutoGather", f"Started with {[r.name for r in order]}.")
        self.event_system.publish(events.AUTO_GATHER_STARTED, {"order": list(order)})
        self._process_head(token)
        return True

    def stop(self) -> bool:
        """Cancel everything pending and go back to STOPPED. Safe from any point of the cycle."""
        if not self.is_running:
            return False

        if self._token:
            self._token.cancel()
        self._token = None
        self.queue = []
        self.original_order = []
        self.current_resource = None
        self.session.clear()
        self.state = AutoGatherState.STOPPED

        Logger.info("AutoGather", f"Stopped. Resources gathered: {self.stats.total_gathered}.")
        self.event_system.publish(events.AUTO_GATHER_STOPPED, {
            "total_gathered": self.stats.total_gathered,
            "stats": self.stats.to_dict(),
        })
        return True

    def _build_order(self) -> List[Resource]:
        if not self.selected_for_auto:
            raise ValidationError(f"Select up to {self.max_resources} discovered resources for auto-gathering.")

        order = []
        for resource_id in self.selected_for_auto:
            resource = self.catalog.get_resource(resource_id)
            if resource is None:
                Logger.warning("AutoGather", f"Resource {resource_id} is no longer in the catalog, skipping it.")
                continue
            if not resource.required_combination:
                # An empty combination never starts the timer
                Logger.warning("AutoGather", f"{resource.name} has no element combination, skipping it.")
                continue
            order.append(resource)

        if not order:
            raise ValidationError(f"Select up to {self.max_resources} discovered resources for auto-gathering.")
        return order

    # --- Cycle steps ---

    def _process_head(self, token: CancellationToken) -> None:
        if token.cancelled:
            return
        if not self.queue:
            self.stop()
            return

        resource = self.queue[0]
        self.current_resource = resource
        Logger.debug("AutoGather", f"Next up: {resource.name} ({len(self.queue)} left this cycle).")
        self.session.begin(resource)
        self.session.reveal(run_token=token)

    def _begin_cycle(self, token: CancellationToken) -> None:
        if token.cancelled:
            return
        self.queue = list(self.original_order)
        self._process_head(token)

    def _advance(self, token: CancellationToken, pop_head: bool) -> None:
        self.session.clear()
        self.current_resource = None
        if pop_head and self.queue:
            self.queue.pop(0)

        if not self.queue:
            self.stats.cycles_completed += 1
            Logger.debug("AutoGather", f"Cycle {self.stats.cycles_completed} complete.")
            self.event_system.publish(events.AUTO_GATHER_CYCLE_COMPLETED, {
                "cycles_completed": self.stats.cycles_completed,
                "stats": self.stats.to_dict(),
            })
            self.scheduler.call_later(self.cycle_delay_ms, lambda: self._begin_cycle(token), label="auto:cycle")
        else:
            self.scheduler.call_later(self.resource_delay_ms, lambda: self._process_head(token), label="auto:next")

    def _current_run(self, data: Dict[str, Any]) -> Optional[CancellationToken]:
        """The live token when the event is about the resource this run is working on."""
        token = self._token
        if not self.is_running or token is None or token.cancelled:
            return None
        if self.current_resource is None or data.get("resource") is not self.current_resource:
            return None
        return token

    def _on_gather_completed(self, event_type: str, data: Dict[str, Any]) -> None:
        token = self._current_run(data)
        if token is None:
            return
        resource = self.current_resource
        self.stats.record(resource.resource_id)
        self.event_system.publish(events.AUTO_GATHER_RESOURCE_GATHERED, {
            "resource": resource,
            "stats": self.stats.to_dict(),
        })
        self._advance(token, pop_head=True)

    def _on_gather_failed(self, event_type: str, data: Dict[str, Any]) -> None:
        token = self._current_run(data)
        if token is None:
            return
        resource = self.current_resource
        Logger.warning("AutoGather", f"Gathering {resource.name} failed, policy '{self.failure_policy}'.")

        if self.failure_policy == "halt":
            self.stop()
        elif self.failure_policy == "retry":
            self._advance(token, pop_head=False)
        else:
            self._advance(token, pop_head=True)

    # --- Notifications ---

    def _notice(self, message: str) -> None:
        Logger.info("AutoGather", message)
        self.event_system.publish(events.NOTICE, {"message": message, "level": "warning"})

    def _publish_membership(self, resource_id: str, selected: bool) -> None:
        self.event_system.publish(events.AUTO_GATHER_MEMBERSHIP_CHANGED, {
            "resource_id": resource_id,
            "selected": selected,
            "members": list(self.selected_for_auto),
        })
