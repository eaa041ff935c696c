# runegather/core/event_system.py
"""
Event system for the gathering engine.
Lets the gathering core announce state changes to journals and display layers
without knowing who is listening.
"""
from typing import Dict, List, Any, Callable, Optional, Set

from runegather.utils.logger import Logger


class EventSystem:
    """
    Centralized publish/subscribe channel.

    Callbacks are invoked synchronously, in subscription order, with
    (event_type, data). A failing callback is logged and skipped so one broken
    listener cannot interrupt the publisher or the other listeners.
    """

    def __init__(self):
        self.subscribers: Dict[str, List[Callable]] = {}
        self.event_history: Dict[str, Any] = {}  # Last payload for each event type

    def subscribe(self, event_type: str, callback: Callable) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The type of event to subscribe to.
            callback: Called as callback(event_type, data).
        """
        listeners = self.subscribers.setdefault(event_type, [])
        if callback not in listeners:
            listeners.append(callback)

    def unsubscribe(self, event_type: str, callback: Callable) -> None:
        """Remove a callback. Unknown callbacks are ignored."""
        if event_type in self.subscribers and callback in self.subscribers[event_type]:
            self.subscribers[event_type].remove(callback)

            if not self.subscribers[event_type]:
                self.subscribers.pop(event_type)

    def publish(self, event_type: str, data: Any = None) -> None:
        """
        Publish an event to every current subscriber.

        Args:
            event_type: The type of event to publish.
            data: The event payload.
        """
        self.event_history[event_type] = data

        # Copy so listeners may (un)subscribe while being notified
        for callback in list(self.subscribers.get(event_type, [])):
            try:
                callback(event_type, data)
            except Exception as e:
                Logger.error("EventSystem", f"Error in event callback for {event_type}: {e}")

    def has_subscribers(self, event_type: str) -> bool:
        return bool(self.subscribers.get(event_type))

    def get_last_event_data(self, event_type: str, default: Any = None) -> Any:
        """
        Get the payload from the last occurrence of an event type.

        Returns:
            The event data, or default if no such event has occurred.
        """
        return self.event_history.get(event_type, default)

    def clear_history(self, event_types: Optional[Set[str]] = None) -> None:
        """Clear event history for the given types, or all of it."""
        if event_types is None:
            self.event_history.clear()
        else:
            for event_type in event_types:
                self.event_history.pop(event_type, None)
