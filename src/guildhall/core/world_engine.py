"""Pure world-state transitions: time of day, random events, discovery."""

import random
from datetime import datetime, timedelta, timezone
from uuid import uuid4

from guildhall.constants import EVENT_DURATION_HOURS, EVENT_SPAWN_CHANCE, MAX_ACTIVE_EVENTS
from guildhall.models import EventType, TimeOfDay, World, WorldEvent

TIME_CYCLE = list(TimeOfDay)

EVENT_EFFECTS = {
    EventType.MONSTER_INVASION: {"danger": 1.5, "resource_gain": 0.8},
    EventType.FESTIVAL: {"mood": 1.2, "resource_gain": 1.0},
    EventType.NATURAL_DISASTER: {"resource_gain": 0.5},
    EventType.MERCHANT_CARAVAN: {"resource_gain": 1.2},
}


def next_time_of_day(current: TimeOfDay) -> TimeOfDay:
    return TIME_CYCLE[(TIME_CYCLE.index(current) + 1) % len(TIME_CYCLE)]


def advance_time(world: World) -> World:
    """dawn -> morning -> noon -> afternoon -> evening -> night -> dawn"""
    return world.model_copy(update={"time_of_day": next_time_of_day(world.time_of_day)})


def expire_events(world: World, now: datetime) -> World:
    """Drop events whose duration has elapsed, along with any already inactive."""
    events = [
        event
        for event in world.events
        if event.is_active and event.start_time + timedelta(hours=event.duration) > now
    ]
    if len(events) == len(world.events):
        return world
    return world.model_copy(update={"events": events})


def spawn_event(
    world: World,
    rng: random.Random,
    chance: float = EVENT_SPAWN_CHANCE,
    now: datetime | None = None,
) -> tuple[World, WorldEvent | None]:
    """
    Roll for a random world event.

    A full event list short-circuits before the roll, so nothing is ever
    added past MAX_ACTIVE_EVENTS.
    """
    if len(world.active_events) >= MAX_ACTIVE_EVENTS:
        return world, None

    if rng.random() >= chance:
        return world, None

    event_type = rng.choice(list(EventType))
    label = event_type.value.replace("_", " ")
    candidates = world.discovered_locations or [location.id for location in world.locations]
    event = WorldEvent(
        id=f"event_{uuid4().hex[:8]}",
        type=event_type,
        name=f"Random {label}",
        description=f"A {label} has occurred!",
        location_id=rng.choice(candidates) if candidates else None,
        start_time=now or datetime.now(timezone.utc),
        duration=EVENT_DURATION_HOURS,
        effects=EVENT_EFFECTS[event_type],
    )
    return world.model_copy(update={"events": [*world.events, event]}), event


def discover_location(world: World, location_id: str) -> World:
    """Flip the discovered flag on one location; everything else is untouched."""
    locations = [
        location.model_copy(update={"is_discovered": True}) if location.id == location_id else location
        for location in world.locations
    ]
    return world.model_copy(update={"locations": locations})
