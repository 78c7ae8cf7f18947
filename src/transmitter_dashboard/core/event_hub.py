import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

# Topics published by the dashboard components
TOPIC_SNAPSHOT_REPLACED = "snapshot_replaced"
TOPIC_HISTORY_APPENDED = "history_appended"
TOPIC_SELECTION_CHANGED = "selection_changed"
TOPIC_TRANSFORM_CHANGED = "transform_changed"


class EventHub:
    """
    Topic-based publish/subscribe between dashboard components.
    Handlers are called synchronously as handler(topic, message), in subscription
    order, on the thread that publishes. All publishers run on the event loop.
    """

    def __init__(self):
        self._subscribers: Dict[str, List[Callable[[str, Any], None]]] = {}

    def subscribe(self, topic: str, handler: Callable[[str, Any], None]):
        if topic not in self._subscribers:
            self._subscribers[topic] = []
        if handler not in self._subscribers[topic]:
            self._subscribers[topic].append(handler)
        logger.debug(f"Subscribed to {topic}")

    def unsubscribe(self, topic: str, handler: Callable[[str, Any], None]):
        if topic in self._subscribers:
            if handler in self._subscribers[topic]:
                self._subscribers[topic].remove(handler)
                logger.debug(f"Unsubscribed from {topic}")

    def unsubscribe_all(self):
        self._subscribers.clear()

    def subscriber_count(self, topic: str) -> int:
        return len(self._subscribers.get(topic, []))

    def send_all_on_topic(self, topic: str, message: Any):
        if topic not in self._subscribers:
            return
        # Copy so handlers may unsubscribe while we iterate
        handlers = self._subscribers[topic][:]
        for handler in handlers:
            try:
                handler(topic, message)
            except Exception as e:
                logger.error(f"Error handling message on topic {topic}: {e}")
