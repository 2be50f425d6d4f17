# -*- coding: utf-8 -*-
"""core/events.py

Typed change notifications for the craft store.

Every mutation of `CraftStore` publishes exactly one event per observable
change. Events are small frozen dataclasses; subscribers register per event
class (`bus.on(ItemAdded, fn)`) or for everything (`bus.on_any(fn)`).

Delivery contract
- synchronous, on the caller's stack, in subscription order
- no batching / deduplication: a burst of slot edits is a burst of events
- re-entrant emits (a handler mutating the store) are queued and delivered
  after the current event has reached all of its handlers (FIFO)
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Deque, Dict, List, Optional, Type, Union

logger = logging.getLogger(__name__)

__all__ = [
    "CraftEvent",
    "DataReset",
    "EventBus",
    "EventStormError",
    "ItemAdded",
    "ItemChanged",
    "ItemDeleted",
    "RecipeAdded",
    "RecipeDeleted",
    "RecipeFieldChanged",
    "RecipeSlotChanged",
    "RecipeSlotsStructureChanged",
]


class EventStormError(RuntimeError):
    pass


@dataclass(frozen=True)
class DataReset:
    name = "dataReset"


@dataclass(frozen=True)
class ItemAdded:
    item_id: str
    name = "itemAdded"


@dataclass(frozen=True)
class ItemChanged:
    item_id: str
    field: str
    value: Any = None
    name = "itemChanged"


@dataclass(frozen=True)
class ItemDeleted:
    item_id: str
    name = "itemDeleted"


@dataclass(frozen=True)
class RecipeAdded:
    recipe_id: str
    name = "recipeAdded"


@dataclass(frozen=True)
class RecipeDeleted:
    recipe_id: str
    name = "recipeDeleted"


@dataclass(frozen=True)
class RecipeFieldChanged:
    """`duration` or `reversible` changed (legacy name recipe:<field>Changed)."""

    recipe_id: str
    field: str
    value: Any = None

    @property
    def name(self) -> str:
        return f"recipe:{self.field}Changed"


@dataclass(frozen=True)
class RecipeSlotsStructureChanged:
    """Slots added/removed/cleared; side None means both sides may have changed."""

    recipe_id: str
    side: Optional[str] = None
    name = "recipe:slotsStructureChanged"


@dataclass(frozen=True)
class RecipeSlotChanged:
    """One slot field changed; carries enough to patch a single rendered slot."""

    recipe_id: str
    side: str
    index: int
    field: str
    value: Any = None
    name = "recipe:slotChanged"


CraftEvent = Union[
    DataReset,
    ItemAdded,
    ItemChanged,
    ItemDeleted,
    RecipeAdded,
    RecipeDeleted,
    RecipeFieldChanged,
    RecipeSlotsStructureChanged,
    RecipeSlotChanged,
]

Handler = Callable[[Any], None]

EVENT_TYPES = (
    DataReset,
    ItemAdded,
    ItemChanged,
    ItemDeleted,
    RecipeAdded,
    RecipeDeleted,
    RecipeFieldChanged,
    RecipeSlotsStructureChanged,
    RecipeSlotChanged,
)


class EventBus:
    """Publish/subscribe bus keyed by event class."""

    def __init__(self, max_drain: int = 10000):
        self._handlers: Dict[type, List[Handler]] = {}
        self._any: List[Handler] = []
        self._queue: Deque[Any] = deque()
        self._dispatching = False
        self._max_drain = max(1, int(max_drain))

    def on(self, event_type: Type[Any], handler: Handler) -> None:
        if event_type not in EVENT_TYPES:
            raise ValueError(f"Unknown event type: {event_type!r}")
        self._handlers.setdefault(event_type, []).append(handler)

    def off(self, event_type: Type[Any], handler: Handler) -> None:
        handlers = self._handlers.get(event_type) or []
        if handler in handlers:
            handlers.remove(handler)

    def on_any(self, handler: Handler) -> None:
        self._any.append(handler)

    def off_any(self, handler: Handler) -> None:
        if handler in self._any:
            self._any.remove(handler)

    @property
    def dispatching(self) -> bool:
        return self._dispatching

    def emit(self, event: CraftEvent) -> None:
        """Deliver `event`; nested emits are queued until the outer one finishes."""
        self._queue.append(event)
        if self._dispatching:
            return

        self._dispatching = True
        delivered = 0
        try:
            while self._queue:
                delivered += 1
                if delivered > self._max_drain:
                    raise EventStormError(
                        f"More than {self._max_drain} events in one dispatch; "
                        "a handler is probably mutating the store in a loop"
                    )
                self._deliver(self._queue.popleft())
        finally:
            self._queue.clear()
            self._dispatching = False

    def _deliver(self, event: Any) -> None:
        logger.debug("event %s %r", event.name, event)
        # copy: handlers may subscribe/unsubscribe while we iterate
        for handler in list(self._handlers.get(type(event)) or ()):
            handler(event)
        for handler in list(self._any):
            handler(event)
