from __future__ import annotations

from typing import Callable


def handles(event_cls: type) -> Callable:
    """Decorator that registers a method as handler for an event type."""

    def decorator(method: Callable) -> Callable:
        method._handles_event = event_cls
        return method

    return decorator


class Dispatcher:
    """Routes events to the methods registered with @handles.

    Handler tables are built per subclass and inherit the tables of the
    base classes, so a subclass only declares what it adds or overrides.
    """

    _handlers: dict[type, str]

    def __init_subclass__(cls, **kwargs: object) -> None:
        super().__init_subclass__(**kwargs)
        cls._handlers = {}
        for base in reversed(cls.__mro__):
            if hasattr(base, "_handlers"):
                cls._handlers.update(base._handlers)
        for name in vars(cls):
            method = getattr(cls, name)
            if callable(method) and hasattr(method, "_handles_event"):
                cls._handlers[method._handles_event] = name

    def dispatch(self, event: object) -> object:
        """Dispatch an event to the registered handler."""
        handler_name = self._handlers.get(type(event))
        if handler_name is None:
            raise ValueError(f"unsupported event: {event!r}")
        return getattr(self, handler_name)(event)

    @property
    def supported_events(self) -> list[type]:
        """Return the event types this dispatcher can handle."""
        return list(self._handlers.keys())
