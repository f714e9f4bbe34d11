"""Named callback registry shared by the dashboard components."""

from typing import Any, Callable, Dict, List


class HookRegistry:
    """Mixin giving a class a fixed set of named hooks.

    Subclasses fill ``self.hooks`` with one empty list per event type before
    registering anything.
    """

    hooks: Dict[str, List[Callable[..., Any]]]

    def register_hook(self, event_type: str, callback: Callable[..., Any]) -> None:
        """Register a callback function for a specific event type.

        Args:
            event_type: The type of event to register for.
            callback: The function to call when the event occurs.
        """
        if event_type not in self.hooks:
            raise ValueError(f"Unknown hook type: {event_type}")
        self.hooks[event_type].append(callback)

    def call_hooks(self, event_type: str, *args: Any, **kwargs: Any) -> None:
        """Call all registered callbacks for the given event type.

        Args:
            event_type: The type of event that occurred.
            *args, **kwargs: Arguments to pass to the callback functions.
        """
        for callback in self.hooks.get(event_type, ()):
            callback(*args, **kwargs)
