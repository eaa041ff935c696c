# runegather/gathering/session.py
from typing import List, Optional

from runegather.config import ELEMENT_REVEAL_DELAY_MS
from runegather.core import events
from runegather.core.event_system import EventSystem
from runegather.core.scheduler import CancellationToken, Scheduler
from runegather.gathering.gather_timer import GatherTimer
from runegather.gathering.matcher import matches
from runegather.models import Resource
from runegather.utils.logger import Logger


class GatherSession:
    """
    The resource currently being worked on and the elements placed for it.

    Every change to the selection re-runs the matcher: a full match starts the
    timer, anything else stops it. Manual play and auto-gathering both go
    through this object, so they can never drive two runs at once.
    """

    def __init__(self, timer: GatherTimer, scheduler: Scheduler, event_system: EventSystem,
                 reveal_delay_ms: int = ELEMENT_REVEAL_DELAY_MS):
        self.timer = timer
        self.scheduler = scheduler
        self.event_system = event_system
        self.reveal_delay_ms = reveal_delay_ms

        self.target_resource: Optional[Resource] = None
        self.selected_elements: List[str] = []
        self._reveal_token: Optional[CancellationToken] = None

    @property
    def is_active(self) -> bool:
        return self.target_resource is not None

    @property
    def progress(self) -> int:
        if self.target_resource is not None and self.timer.resource is self.target_resource:
            return self.timer.progress
        return 0

    @property
    def running(self) -> bool:
        return self.timer.is_running

    @property
    def is_revealing(self) -> bool:
        return self._reveal_token is not None and not self._reveal_token.cancelled

    def begin(self, resource: Resource) -> None:
        """Make resource the target with an empty selection, dropping any previous run."""
        self._cancel_reveal()
        self.timer.stop()
        self.target_resource = resource
        self.selected_elements = []
        self._publish_selection()

    def clear(self) -> None:
        had_target = self.target_resource is not None
        self._cancel_reveal()
        self.timer.stop()
        self.target_resource = None
        self.selected_elements = []
        if had_target:
            self._publish_selection()

    def toggle_element(self, element_id: str) -> bool:
        """Remove element_id if selected, otherwise append it. Returns the matcher verdict."""
        element_id = str(element_id)
        if element_id in self.selected_elements:
            self.selected_elements = [el for el in self.selected_elements if el != element_id]
        else:
            self.selected_elements.append(element_id)
        self._publish_selection()
        return self.evaluate()

    def add_element(self, element_id: str) -> bool:
        self.selected_elements.append(str(element_id))
        self._publish_selection()
        return self.evaluate()

    def remove_element(self, element_id: str) -> bool:
        element_id = str(element_id)
        if element_id in self.selected_elements:
            self.selected_elements.remove(element_id)
            self._publish_selection()
        return self.evaluate()

    def evaluate(self) -> bool:
        if self.target_resource is None or not self.selected_elements:
            if self.timer.is_running:
                self.timer.stop()
            return False

        if matches(self.target_resource.required_combination, self.selected_elements):
            if self.timer.is_idle:
                self.timer.start(self.target_resource, self.selected_elements)
            return True

        if not self.timer.is_idle:
            self.timer.stop()
        return False

    def reveal(self, run_token: Optional[CancellationToken] = None) -> None:
        """
        Place the target's known combination one element at a time.

        Each element lands reveal_delay_ms after the previous one, so the
        matcher only holds (and the timer only starts) once the last one is in.
        The chain dies as soon as the session is cleared, retargeted or
        run_token is cancelled.
        """
        resource = self.target_resource
        if resource is None:
            return
        self._cancel_reveal()
        reveal_token = CancellationToken()
        self._reveal_token = reveal_token
        combination = resource.required_combination

        if not combination:
            reveal_token.cancel()
            self.evaluate()
            return

        def is_stale() -> bool:
            return (reveal_token.cancelled
                    or (run_token is not None and run_token.cancelled)
                    or self.target_resource is not resource)

        def reveal_step(index: int) -> None:
            if is_stale():
                return
            element_id = combination[index]
            self.selected_elements.append(element_id)
            self.event_system.publish(events.ELEMENT_REVEALED,
                                      {"resource": resource, "element_id": element_id, "index": index})
            self._publish_selection()

            if index + 1 < len(combination):
                self.scheduler.call_later(self.reveal_delay_ms, lambda: reveal_step(index + 1), label="reveal")
            else:
                reveal_token.cancel()
            self.evaluate()

        Logger.debug("GatherSession", f"Revealing {len(combination)} elements for {resource.name}.")
        self.scheduler.call_later(self.reveal_delay_ms, lambda: reveal_step(0), label="reveal")

    def _cancel_reveal(self) -> None:
        if self._reveal_token is not None:
            self._reveal_token.cancel()
            self._reveal_token = None

    def _publish_selection(self) -> None:
        self.event_system.publish(events.SELECTION_CHANGED, {
            "resource": self.target_resource,
            "selected_elements": list(self.selected_elements),
        })
