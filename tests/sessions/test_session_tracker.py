"""Unit tests for SessionTracker: the per-player enter/exit state machine."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest

from host.base import TitleTiming
from settlements.models import TransitionKind, Zone
from tracking.session import DEFAULT_WILDERNESS_TEXT, SessionTracker


pytestmark = pytest.mark.unit

TOWN = Zone("town1", 100, 200, 10, 10, "Town", "Welcome")
CAMP = Zone("camp", 0, 0, 5, 5, "Camp", "")


def _calls(host, player="steve"):
    return host.hud(player).calls


class TestTransitions:

    def test_unknown_in_wilderness_emits_nothing(self, host, tracker):
        assert tracker.update("steve", None, (0, 0)) is None
        assert _calls(host) == []
        session = tracker.state_of("steve")
        assert session is not None and session.in_wilderness

    def test_unknown_in_zone_emits_enter(self, host, tracker):
        t = tracker.update("steve", TOWN, (105, 205))
        assert t.kind == TransitionKind.ENTER
        assert t.zone_id == "town1"
        assert _calls(host) == [("update_subtitle", "Welcome"), ("set_title", "Town")]
        assert tracker.state_of("steve").zone_id == "town1"

    def test_enter_exactly_once_while_stationary(self, host, tracker):
        results = [tracker.update("steve", TOWN, (105, 205)) for _ in range(10)]
        assert sum(1 for r in results if r is not None) == 1
        assert results[0] is not None
        assert len(_calls(host)) == 2

    def test_exit_emits_wilderness(self, host, tracker):
        tracker.update("steve", TOWN, (105, 205))
        t = tracker.update("steve", None, (300, 300))
        assert t.kind == TransitionKind.EXIT
        assert t.zone_id == "town1"
        assert _calls(host)[2:] == [
            ("update_subtitle", DEFAULT_WILDERNESS_TEXT),
            ("clear_title", ""),
        ]
        assert tracker.state_of("steve").in_wilderness

    def test_wilderness_repeated_emits_once(self, host, tracker):
        tracker.update("steve", TOWN, (105, 205))
        exits = [tracker.update("steve", None, (300, 300)) for _ in range(5)]
        assert sum(1 for e in exits if e is not None) == 1

    def test_enter_exit_enter_cycle(self, host, tracker):
        kinds = []
        for zone in (TOWN, None, TOWN):
            t = tracker.update("steve", zone, (0, 0))
            kinds.append((t.kind, t.zone_id))
        assert kinds == [
            (TransitionKind.ENTER, "town1"),
            (TransitionKind.EXIT, "town1"),
            (TransitionKind.ENTER, "town1"),
        ]
        assert [c[0] for c in _calls(host)] == [
            "update_subtitle", "set_title",
            "update_subtitle", "clear_title",
            "update_subtitle", "set_title",
        ]

    def test_zone_to_zone_is_single_enter(self, host, tracker):
        tracker.update("steve", TOWN, (105, 205))
        t = tracker.update("steve", CAMP, (0, 0))
        assert t.kind == TransitionKind.ENTER
        assert t.zone_id == "camp"
        # No wilderness message between adjacent zones
        assert ("clear_title", "") not in _calls(host)
        assert host.hud("steve").title == "Camp"
        assert host.hud("steve").subtitle == ""

    def test_players_are_independent(self, host, tracker):
        tracker.update("steve", TOWN, (105, 205))
        assert tracker.update("alex", TOWN, (105, 205)) is not None
        assert tracker.update("steve", TOWN, (105, 205)) is None
        assert len(_calls(host, "alex")) == 2

    def test_transition_count(self, tracker):
        tracker.update("steve", TOWN, (0, 0))
        tracker.update("steve", None, (0, 0))
        tracker.update("steve", None, (0, 0))
        assert tracker.state_of("steve").transitions == 2


class TestEmission:

    def test_wilderness_text_configurable(self, host):
        tracker = SessionTracker(host, wilderness_text="Wilds")
        tracker.update("steve", TOWN, (0, 0))
        tracker.update("steve", None, (0, 0))
        assert host.hud("steve").subtitle == "Wilds"

    def test_title_timing_passed_on_enter(self, host):
        timing = TitleTiming(fade_in=5, stay=40, fade_out=5)
        tracker = SessionTracker(host, title_timing=timing)
        tracker.update("steve", TOWN, (0, 0))
        assert host.hud("steve").timing == timing

    def test_notify_false_advances_state_silently(self, host, tracker):
        t = tracker.update("steve", TOWN, (0, 0), notify=False)
        assert t is not None
        assert _calls(host) == []
        # Re-enabling later does not replay the entry
        assert tracker.update("steve", TOWN, (0, 0)) is None

    def test_display_failure_still_records_transition(self):
        host = MagicMock()
        host.set_title.side_effect = RuntimeError("display gone")
        tracker = SessionTracker(host)

        with pytest.raises(RuntimeError):
            tracker.update("steve", TOWN, (0, 0))

        assert tracker.state_of("steve").zone_id == "town1"
        # Not retried on the next poll
        assert tracker.update("steve", TOWN, (0, 0)) is None
        assert host.set_title.call_count == 1

    def test_subtitle_sent_before_title(self):
        host = MagicMock()
        tracker = SessionTracker(host)
        tracker.update("steve", TOWN, (0, 0))
        tracker.update("steve", None, (0, 0))
        names = [c[0] for c in host.method_calls]
        assert names == ["update_subtitle", "set_title", "update_subtitle", "clear_title"]


class TestSessionBookkeeping:

    def test_state_of_unknown(self, tracker):
        assert tracker.state_of("nobody") is None

    def test_forget_resets_to_unknown(self, host, tracker):
        tracker.update("steve", TOWN, (0, 0))
        assert tracker.forget("steve") is True
        assert tracker.forget("steve") is False
        # Unknown again: no spurious exit in wilderness
        assert tracker.update("steve", None, (0, 0)) is None

    def test_prune_drops_departed_players(self, tracker):
        tracker.update("steve", TOWN, (0, 0))
        tracker.update("alex", None, (0, 0))
        assert tracker.prune({"alex"}) == 1
        assert set(tracker.get_sessions()) == {"alex"}

    def test_reset(self, tracker):
        tracker.update("steve", TOWN, (0, 0))
        tracker.reset()
        assert tracker.get_sessions() == {}
