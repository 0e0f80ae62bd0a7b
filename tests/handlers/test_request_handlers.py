"""Unit tests for ZoneRequestHandler: command/form requests to registry CRUD."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from commands import handlers
from commands.handlers import ZoneRequestHandler, format_zone_row
from settlements.models import Zone
from tracking.preferences import NotifierPreferences


pytestmark = pytest.mark.unit


@pytest.fixture
def prefs(kv):
    return NotifierPreferences(kv)


@pytest.fixture
def handler(registry, host, prefs):
    host.join("steve", 100.7, 64, 200.2)
    return ZoneRequestHandler(registry, host, preferences=prefs)


def _last_message(host, player="steve"):
    return host.hud(player).messages[-1]


class TestCreate:

    def test_set_command_creates_zone_at_player(self, handler, registry, host):
        reply = handler.handle_command("steve", "zone:set", 'town1 10 10 "Town" "Welcome"')
        assert reply.ok is True
        zone = registry.get_zone("town1")
        assert (zone.x, zone.z, zone.rx, zone.rz) == (100, 200, 10, 10)
        assert reply.zone == zone
        assert "[100, 200]" in reply.message
        assert "21x21" in reply.message

    def test_confirmation_sent_to_player(self, handler, host):
        handler.handle_command("steve", "zone:set", 'town1 10 10 "Town" "Welcome"')
        assert _last_message(host).startswith(f"{handlers.SUCCESS}[CityNotifier] Zone 'town1'")
        assert host.hud("steve").sounds == ["random.levelup"]

    def test_center_floors_negative_position(self, handler, registry, host):
        host.move("steve", -0.5, 64, -10.1)
        handler.create("steve", "west", 1, 1, "West")
        zone = registry.get_zone("west")
        assert (zone.x, zone.z) == (-1, -11)

    def test_duplicate_id_rejected(self, handler, registry, host):
        handler.create("steve", "town1", 10, 10, "Town")
        host.move("steve", 0, 0, 0)
        reply = handler.create("steve", "town1", 5, 5, "Other")
        assert reply.ok is False
        assert reply.error == handlers.EXISTS
        assert registry.get_zone("town1").title == "Town"
        assert _last_message(host).startswith(handlers.ERROR)

    def test_malformed_command_is_usage_error(self, handler, registry, host):
        reply = handler.handle_command("steve", "zone:set", "town1 ten 10")
        assert reply.ok is False
        assert reply.error == handlers.USAGE
        assert reply.message.startswith("Usage:")
        assert len(registry) == 0
        assert host.hud("steve").sounds == []

    def test_offline_requester(self, handler, registry):
        reply = handler.create("ghost", "town1", 1, 1, "Town")
        assert reply.error == handlers.OFFLINE
        assert len(registry) == 0

    def test_negative_radius_rejected(self, handler, registry):
        reply = handler.create("steve", "town1", -1, 1, "Town")
        assert reply.error == handlers.USAGE
        assert len(registry) == 0

    def test_form_add(self, handler, registry):
        reply = handler.form_add("steve", {"id": "town1", "rx": "4", "rz": "6",
                                           "subtitle": "Sub", "title": "Title"})
        assert reply.ok is True
        zone = registry.get_zone("town1")
        assert (zone.rx, zone.rz, zone.title, zone.subtitle) == (4, 6, "Title", "Sub")

    def test_form_add_bad_number(self, handler, registry):
        reply = handler.form_add("steve", {"id": "town1", "rx": "four", "rz": "6", "title": "T"})
        assert reply.error == handlers.USAGE
        assert "rx" in reply.message
        assert len(registry) == 0

    def test_unsaved_change_is_reported(self, handler, kv):
        kv.fail_writes = True
        reply = handler.create("steve", "town1", 1, 1, "Town")
        assert reply.ok is True
        assert "could not be saved" in reply.message

    def test_no_sound_when_disabled(self, registry, host):
        host.join("steve", 0, 0, 0)
        quiet = ZoneRequestHandler(registry, host, confirmation_sound=None)
        quiet.create("steve", "town1", 1, 1, "Town")
        assert host.hud("steve").sounds == []


class TestDelete:

    def test_delete_command(self, handler, registry):
        handler.create("steve", "town1", 1, 1, "Town")
        reply = handler.handle_command("steve", "zone:del", "town1")
        assert reply.ok is True
        assert reply.zone.zone_id == "town1"
        assert "town1" not in registry

    def test_delete_missing(self, handler, registry, host):
        handler.create("steve", "town1", 1, 1, "Town")
        reply = handler.handle_command("steve", "zone:del", "ghost")
        assert reply.ok is False
        assert reply.error == handlers.NOT_FOUND
        assert len(registry) == 1
        assert "not found" in _last_message(host)

    def test_form_remove_without_player(self, handler, registry):
        handler.create("steve", "town1", 1, 1, "Town")
        assert handler.form_remove(None, "town1").ok is True
        assert len(registry) == 0

    def test_zone_choices(self, handler):
        handler.create("steve", "b", 1, 1, "B")
        handler.create("steve", "a", 1, 1, "A")
        assert handler.zone_choices() == ["b", "a"]


class TestList:

    def test_empty_is_informational(self, handler, host):
        reply = handler.handle_command("steve", "zone:list", "")
        assert reply.ok is True
        assert reply.message == "No zones registered."
        assert _last_message(host).startswith(handlers.INFO)

    def test_lists_ids(self, handler):
        handler.create("steve", "town1", 1, 1, "Town")
        handler.create("steve", "camp", 1, 1, "Camp")
        reply = handler.handle_command("steve", "zone:list", "")
        assert reply.message == "Zones: town1, camp"
        assert [z.zone_id for z in reply.zones] == ["town1", "camp"]

    def test_full_listing_has_bounds(self, handler):
        handler.create("steve", "town1", 10, 10, "Town")
        reply = handler.handle_command("steve", "zone:list", "full")
        assert "town1: [90, 190] to [110, 210] - Town" in reply.message

    def test_list_without_requester_sends_nothing(self, handler, host):
        handler.list_zones(None)
        assert host.hud("steve").messages == []

    def test_format_zone_row(self):
        assert format_zone_row(Zone("a", 0, 0, 1, 2, "A")) == "a: [-1, -2] to [1, 2] - A"


class TestToggle:

    def test_toggle_flips(self, handler, prefs):
        reply = handler.handle_command("steve", "zone:toggle", "")
        assert reply.message == "Zone notifications disabled."
        assert prefs.is_enabled("steve") is False
        handler.handle_command("steve", "zone:toggle", "")
        assert prefs.is_enabled("steve") is True

    def test_toggle_explicit(self, handler, prefs):
        handler.handle_command("steve", "zone:toggle", "off")
        handler.handle_command("steve", "zone:toggle", "off")
        assert prefs.is_enabled("steve") is False
        handler.handle_command("steve", "zone:toggle", "on")
        assert prefs.is_enabled("steve") is True

    def test_toggle_without_preferences(self, registry, host):
        reply = ZoneRequestHandler(registry, host).toggle("steve", "on")
        assert reply.error == handlers.UNAVAILABLE


class TestRouting:

    def test_foreign_namespace_returns_none(self, handler, host):
        assert handler.handle_command("steve", "biome:list", "") is None
        assert host.hud("steve").messages == []

    def test_custom_namespace_and_prefix(self, registry, host):
        host.join("steve", 0, 0, 0)
        h = ZoneRequestHandler(registry, host, namespace="city", prefix="[Cities]")
        assert h.handle_command("steve", "city:list", "").ok is True
        assert "[Cities]" in host.hud("steve").messages[-1]

    def test_message_failure_does_not_break_request(self, registry):
        host = MagicMock()
        host.get_player.return_value = MagicMock(x=5.0, z=5.0)
        host.send_message.side_effect = RuntimeError("chat offline")
        host.play_sound.side_effect = RuntimeError("no audio")
        reply = ZoneRequestHandler(registry, host).create("steve", "town1", 1, 1, "Town")
        assert reply.ok is True
        assert "town1" in registry
