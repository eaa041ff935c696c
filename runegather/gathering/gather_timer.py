# runegather/gathering/gather_timer.py
from typing import Mapping, Optional, Sequence

from runegather.config import GATHER_MAX_PROGRESS, GATHER_PROGRESS_STEP, GATHER_TICK_INTERVAL_MS
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.scheduler import CancellationToken, ScheduledTask, Scheduler
from runegather.errors import DiscoveryFailure
from runegather.gathering.discovery import DiscoveryGateway, DiscoveryResult
from runegather.gathering.matcher import matches
from runegather.models import Resource
from runegather.utils.logger import Logger


class GatherState:
    IDLE = "idle"
    ACCUMULATING = "accumulating"
    COMPLETE = "complete"


class GatherTimer:
    """
    Drives a single accumulation run from 0 to 100.

    IDLE -> ACCUMULATING -> COMPLETE -> IDLE. Only IDLE accepts start(), so at
    most one run exists at a time; whoever owns the timer calls stop() to go
    back to IDLE after a COMPLETE. Reaching 100 makes exactly one discovery call.
    """

    def __init__(self, scheduler: Scheduler, gateway: DiscoveryGateway, event_system: EventSystem,
                 character_id: str,
                 tick_interval_ms: int = GATHER_TICK_INTERVAL_MS,
                 progress_step: int = GATHER_PROGRESS_STEP,
                 max_progress: int = GATHER_MAX_PROGRESS):
        self.scheduler = scheduler
        self.gateway = gateway
        self.event_system = event_system
        self.character_id = str(character_id)
        self.tick_interval_ms = tick_interval_ms
        self.progress_step = progress_step
        self.max_progress = max_progress

        self.state = GatherState.IDLE
        self.progress = 0
        self.resource: Optional[Resource] = None
        self.last_result: Optional[DiscoveryResult] = None
        self.discovery_calls = 0

        self._token: Optional[CancellationToken] = None
        self._task: Optional[ScheduledTask] = None

    @property
    def is_idle(self) -> bool:
        return self.state == GatherState.IDLE

    @property
    def is_running(self) -> bool:
        return self.state == GatherState.ACCUMULATING

    def start(self, resource: Resource, selected_elements: Sequence[str]) -> bool:
        if self.state != GatherState.IDLE:
            Logger.debug("GatherTimer", f"Start ignored for {resource.name}: timer is {self.state}.")
            return False
        if not matches(resource.required_combination, selected_elements):
            return False

        token = CancellationToken()
        self._token = token
        self.resource = resource
        self.progress = 0
        self.last_result = None
        self.state = GatherState.ACCUMULATING
        self._task = self.scheduler.call_every(
            self.tick_interval_ms, lambda: self._tick(token), label=f"gather:{resource.resource_id}")

        Logger.debug("GatherTimer", f"Accumulation started for {resource.name}.")
        self.event_system.publish(events.GATHER_STARTED, {"resource": resource})
        return True

    def stop(self) -> bool:
        """Cancel the run and return to IDLE with progress 0. No-op when already idle."""
        if self.state == GatherState.IDLE:
            return False

        if self._token:
            self._token.cancel()
        if self._task:
            self._task.cancel()
        resource, progress = self.resource, self.progress

        self._token = None
        self._task = None
        self.resource = None
        self.progress = 0
        self.state = GatherState.IDLE

        Logger.debug("GatherTimer", f"Stopped at {progress}% ({resource.name if resource else '-'}).")
        self.event_system.publish(events.GATHER_STOPPED, {"resource": resource, "progress": progress})
        return True

    def _tick(self, token: CancellationToken) -> None:
        if token.cancelled or self.state != GatherState.ACCUMULATING:
            return

        self.progress = min(self.max_progress, self.progress + self.progress_step)
        self.event_system.publish(events.GATHER_PROGRESS, {"resource": self.resource, "progress": self.progress})

        # A progress listener may have torn the run down
        if token.cancelled:
            return
        if self.progress >= self.max_progress:
            self._complete(token)

    def _complete(self, token: CancellationToken) -> None:
        if self._task:
            self._task.cancel()
        self.state = GatherState.COMPLETE
        resource = self.resource

        result = self._request_discovery(resource)
        self.last_result = result
        if token.cancelled:
            return

        if result.success:
            if resource.mark_discovered():
                Logger.info("GatherTimer", f"{resource.name} discovered.")
            self.event_system.publish(events.GATHER_COMPLETED, {"resource": resource, "result": result})
        else:
            self.event_system.publish(events.GATHER_FAILED, {"resource": resource, "result": result})

    def _request_discovery(self, resource: Resource) -> DiscoveryResult:
        self.discovery_calls += 1
        try:
            result = self.gateway.discover(resource.resource_id, self.character_id)
        except DiscoveryFailure as e:
            Logger.warning("GatherTimer", f"Discovery of {resource.name} refused: {e}")
            return DiscoveryResult(False, str(e))
        except Exception as e:
            Logger.error("GatherTimer", f"Discovery gateway fault for {resource.name}: {e}")
            return DiscoveryResult(False, str(e))

        # Gateways speaking the plain {success, message} mapping are accepted too
        if isinstance(result, Mapping):
            result = DiscoveryResult(bool(result.get("success")), result.get("message"))
        elif not isinstance(result, DiscoveryResult):
            Logger.error("GatherTimer", f"Discovery gateway returned {result!r} for {resource.name}.")
            return DiscoveryResult(False, "Invalid response from the discovery gateway.")

        if not result.success:
            message = result.message
            Logger.warning("GatherTimer", f"Discovery of {resource.name} failed: {message or 'no reason given'}")
            return DiscoveryResult(False, message)
        return result
