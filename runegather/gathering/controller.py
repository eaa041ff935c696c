# runegather/gathering/controller.py
from typing import Any, Dict, Optional

from runegather.catalog import Catalog, CatalogProvider
from runegather.config import (
    AUTO_GATHER_CYCLE_DELAY_MS, AUTO_GATHER_FAILURE_POLICY, AUTO_GATHER_MAX_RESOURCES,
    AUTO_GATHER_RESOURCE_DELAY_MS, ELEMENT_REVEAL_DELAY_MS, GATHER_PROGRESS_STEP, GATHER_TICK_INTERVAL_MS
)
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.scheduler import Scheduler
from runegather.errors import CatalogUnavailable, ValidationError
from runegather.gathering.auto_gather import AutoGatherScheduler
from runegather.gathering.discovery import DiscoveryGateway
from runegather.gathering.gather_timer import GatherTimer
from runegather.gathering.session import GatherSession
from runegather.models import Resource
from runegather.utils.logger import Logger


class GatherSessionController:
    """
    Entry point of the gathering minigame for UI layers.

    Owns the one GatherTimer/GatherSession pair and the AutoGatherScheduler.
    Manual actions are refused while auto-gathering runs. Rejected actions
    publish a 'notice' event and return False; accepted ones return True.
    """

    def __init__(self, event_system: EventSystem, scheduler: Scheduler, gateway: DiscoveryGateway,
                 character_id: str, catalog: Optional[Catalog] = None,
                 tick_interval_ms: int = GATHER_TICK_INTERVAL_MS,
                 progress_step: int = GATHER_PROGRESS_STEP,
                 reveal_delay_ms: int = ELEMENT_REVEAL_DELAY_MS,
                 max_auto_resources: int = AUTO_GATHER_MAX_RESOURCES,
                 resource_delay_ms: int = AUTO_GATHER_RESOURCE_DELAY_MS,
                 cycle_delay_ms: int = AUTO_GATHER_CYCLE_DELAY_MS,
                 failure_policy: str = AUTO_GATHER_FAILURE_POLICY):
        self.event_system = event_system
        self.scheduler = scheduler
        self.character_id = str(character_id)
        self.catalog = catalog if catalog is not None else Catalog()

        self.timer = GatherTimer(scheduler, gateway, event_system, self.character_id,
                                 tick_interval_ms=tick_interval_ms, progress_step=progress_step)
        self.session = GatherSession(self.timer, scheduler, event_system, reveal_delay_ms=reveal_delay_ms)
        self.auto_gather = AutoGatherScheduler(
            self.session, self.catalog, scheduler, event_system,
            max_resources=max_auto_resources,
            resource_delay_ms=resource_delay_ms,
            cycle_delay_ms=cycle_delay_ms,
            failure_policy=failure_policy,
        )

        event_system.subscribe(events.GATHER_COMPLETED, self._on_manual_run_finished)
        event_system.subscribe(events.GATHER_FAILED, self._on_manual_run_finished)

    @property
    def mode(self) -> str:
        return "auto" if self.auto_gather.is_running else "manual"

    # --- Catalog ---

    def load_catalog(self, provider: CatalogProvider, location_id: Optional[str] = None) -> bool:
        try:
            catalog = provider.load(self.character_id, location_id)
        except CatalogUnavailable as e:
            Logger.error("GatherController", f"Catalog unavailable: {e}")
            self.set_catalog(Catalog())
            self._notice("No resources can be gathered here right now.", level="error")
            return False
        self.set_catalog(catalog)
        return True

    def set_catalog(self, catalog: Catalog) -> None:
        self.auto_gather.set_catalog(catalog)
        self.session.clear()
        self.catalog = catalog

    # --- Manual mode ---

    def select_resource(self, resource_id: str) -> bool:
        try:
            self._require_manual_mode()
            resource = self._require_resource(resource_id)
        except ValidationError as e:
            self._notice(str(e))
            return False

        if self.session.target_resource is resource:
            self.session.clear()
            return True

        self.session.begin(resource)
        if resource.discovered:
            self.session.reveal()
        return True

    def toggle_element(self, element_id: str) -> bool:
        try:
            element_id = self._require_editable_selection(element_id)
        except ValidationError as e:
            self._notice(str(e))
            return False
        self.session.toggle_element(element_id)
        return True

    def add_element(self, element_id: str) -> bool:
        """Append element_id even if already selected (combinations may repeat an element)."""
        try:
            element_id = self._require_editable_selection(element_id)
        except ValidationError as e:
            self._notice(str(e))
            return False
        self.session.add_element(element_id)
        return True

    def clear_elements(self) -> bool:
        try:
            self._require_manual_mode()
            resource = self.session.target_resource
            if resource is None:
                raise ValidationError("Select a resource first.")
            if resource.discovered:
                raise ValidationError(f"The combination for {resource.name} is already known.")
        except ValidationError as e:
            self._notice(str(e))
            return False
        self.session.begin(resource)
        return True

    # --- Auto mode ---

    def toggle_auto_gather_membership(self, resource_id: str) -> bool:
        return self.auto_gather.toggle_membership(resource_id)

    def start_or_stop_auto_gather(self) -> bool:
        if self.auto_gather.is_running:
            return self.auto_gather.stop()
        # The manual session gives way to the scheduler
        self.session.clear()
        return self.auto_gather.start()

    # --- Display ---

    def get_state(self) -> Dict[str, Any]:
        target = self.session.target_resource
        return {
            "mode": self.mode,
            "target_resource": target.resource_id if target else None,
            "selected_elements": list(self.session.selected_elements),
            "progress": self.session.progress,
            "running": self.session.running,
            "timer_state": self.timer.state,
            "auto_members": list(self.auto_gather.selected_for_auto),
            "auto_phase": self.auto_gather.phase,
            "queue": [r.resource_id for r in self.auto_gather.queue],
            "stats": self.auto_gather.stats.to_dict(),
        }

    # --- Guards ---

    def _require_manual_mode(self) -> None:
        if self.auto_gather.is_running:
            raise ValidationError("Manual gathering is disabled while auto-gathering is running.")

    def _require_resource(self, resource_id: str) -> Resource:
        resource = self.catalog.get_resource(resource_id)
        if resource is None:
            raise ValidationError(f"Unknown resource '{resource_id}'.")
        return resource

    def _require_editable_selection(self, element_id: str) -> str:
        self._require_manual_mode()
        resource = self.session.target_resource
        if resource is None:
            raise ValidationError("Select a resource first.")
        if resource.discovered:
            raise ValidationError(f"The combination for {resource.name} is already known.")
        element = self.catalog.get_element(element_id)
        if element is None:
            raise ValidationError(f"Unknown element '{element_id}'.")
        return element.element_id

    # --- Event handlers ---

    def _on_manual_run_finished(self, event_type: str, data: Dict[str, Any]) -> None:
        if self.auto_gather.is_running:
            return
        if data.get("resource") is not self.session.target_resource:
            return
        # One run per selection; the player reselects to go again.
        self.session.clear()

    def _notice(self, message: str, level: str = "warning") -> None:
        Logger.info("GatherController", message)
        self.event_system.publish(events.NOTICE, {"message": message, "level": level})
