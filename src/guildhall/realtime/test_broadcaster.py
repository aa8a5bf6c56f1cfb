from datetime import datetime, timezone

from guildhall.core.world_generator import generate_world
from guildhall.models import ActionKind, ActionResult
from guildhall.realtime import EventBroadcaster, InMemoryPublisher, SocketIOPublisher, guild_room, world_room


def _outcome(hero_id: str = "hero_1") -> ActionResult:
    return ActionResult(
        action=ActionKind.REST,
        hero_id=hero_id,
        stat_changes={"energy": 40},
        summary="Hero restored energy and health",
        timestamp=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )


def test_hero_update_goes_only_to_guild_room(make_hero):
    publisher = InMemoryPublisher()
    broadcaster = EventBroadcaster(publisher)

    broadcaster.hero_updated("guild_1", _outcome(), make_hero())

    assert len(publisher.messages) == 1
    room, event, payload = publisher.messages[0]
    assert room == guild_room("guild_1") == "guild:guild_1"
    assert event == "hero:update"
    assert payload["result"]["statChanges"] == {"energy": 40}
    assert payload["hero"]["id"] == "hero_1"
    assert publisher.for_room(guild_room("guild_2")) == []


def test_hero_update_without_guild_is_dropped(make_hero):
    publisher = InMemoryPublisher()
    EventBroadcaster(publisher).hero_updated(None, _outcome(), make_hero())
    assert publisher.messages == []


def test_world_state_and_errors():
    publisher = InMemoryPublisher()
    broadcaster = EventBroadcaster(publisher)
    world = generate_world("player_1", seed="broadcast")

    broadcaster.world_state(world)
    broadcaster.error("guild:guild_1", "Please try again")

    assert publisher.for_room(world_room(world.id)) == [("world:state", world.to_wire())]
    assert publisher.for_room("guild:guild_1") == [("error", {"message": "Please try again"})]


def test_socketio_publisher_emits_in_background():
    class FakeSocketIO:
        def __init__(self):
            self.emitted = []

        def start_background_task(self, target, *args):
            target(*args)

        def emit(self, event, payload, to=None):
            self.emitted.append((event, payload, to))

    socketio = FakeSocketIO()
    SocketIOPublisher(socketio).publish("guild:guild_1", "hero:update", {"ok": True})

    assert socketio.emitted == [("hero:update", {"ok": True}, "guild:guild_1")]


def test_socketio_publisher_logs_emit_failures(caplog):
    class BrokenSocketIO:
        def start_background_task(self, target, *args):
            target(*args)

        def emit(self, event, payload, to=None):
            raise ConnectionError("socket closed")

    SocketIOPublisher(BrokenSocketIO()).publish("guild:guild_1", "hero:update", {})

    assert "Failed to emit hero:update" in caplog.text
