import inspect
from typing import Any, Callable, Dict, List, NamedTuple
from datetime import datetime

__all__ = ['EXPENSES_CHANGED', 'SETTINGS_CHANGED', 'AUTH_CHANGED', 'Event', 'EventBus', 'scoped']

EXPENSES_CHANGED = "EXPENSES_CHANGED"
SETTINGS_CHANGED = "SETTINGS_CHANGED"
AUTH_CHANGED = "AUTH_CHANGED"


class Event(NamedTuple):
    name: str
    ts: str
    payload: dict


Handler = Callable[[Event, dict], Any]


def scoped(name: str, uid: str) -> str:
    """Per-user event name, e.g. ``EXPENSES_CHANGED:uid-1``."""
    return f"{name}:{uid}"


class EventBus:
    def __init__(self):
        self._subscribers: Dict[str, List[Handler]] = {}

    def subscribe(self, name: str, handler: Handler) -> Callable[[], None]:
        if name not in self._subscribers:
            self._subscribers[name] = []
        self._subscribers[name].append(handler)
        return lambda: self.unsubscribe(name, handler)

    def publish(self, name: str, payload: dict) -> List[Any]:
        if name not in self._subscribers:
            return []

        event = Event(
            name=name,
            ts=datetime.now().isoformat(),
            payload=payload
        )

        results = []
        # copy: a handler may unsubscribe itself while we iterate
        for handler in list(self._subscribers[name]):
            result = handler(event, payload)
            results.append(result)
        return results

    async def apublish(self, name: str, payload: dict) -> List[Any]:
        """Like publish, but awaits handlers that return awaitables."""
        results = []
        for result in self.publish(name, payload):
            if inspect.isawaitable(result):
                result = await result
            results.append(result)
        return results

    def unsubscribe(self, name: str, handler: Handler) -> None:
        if name in self._subscribers:
            if handler in self._subscribers[name]:
                self._subscribers[name].remove(handler)

    def subscriber_count(self, name: str) -> int:
        return len(self._subscribers.get(name, []))
