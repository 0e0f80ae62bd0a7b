"""Wiring of the notifier's owned state objects.

Everything the routers and the poll loop share is built here once and
hung off ``app.state.services``; nothing is kept in module globals.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request

from commands.handlers import ZoneRequestHandler
from host.base import HostAdapter, TitleTiming
from host.storage import KeyValueStore
from server.config import Settings
from settlements.locator import ZoneLocator
from settlements.registry import ZoneRegistry
from settlements.store import ZoneStore
from tracking.poll import PollLoop
from tracking.preferences import NotifierPreferences
from tracking.session import SessionTracker


@dataclass
class NotifierServices:
    """Owned state of one running notifier."""

    settings: Settings
    host: HostAdapter
    kv: KeyValueStore
    registry: ZoneRegistry
    locator: ZoneLocator
    tracker: SessionTracker
    preferences: NotifierPreferences
    poll_loop: PollLoop
    handler: ZoneRequestHandler


def build_services(settings: Settings, host: HostAdapter, kv: KeyValueStore) -> NotifierServices:
    """Assemble the registry, tracker, poll loop and request handler.

    The registry is not loaded here; the app lifespan loads it once the
    storage backend is ready.
    """
    registry = ZoneRegistry(ZoneStore(kv, settings.storage_key), autoload=False)
    locator = ZoneLocator(registry)
    tracker = SessionTracker(
        host,
        wilderness_text=settings.wilderness_text,
        title_timing=TitleTiming(
            fade_in=settings.title_fade_in_ticks,
            stay=settings.title_stay_ticks,
            fade_out=settings.title_fade_out_ticks,
        ),
    )
    preferences = NotifierPreferences(kv, settings.preference_key_prefix)
    poll_loop = PollLoop(
        host,
        locator,
        tracker,
        preferences=preferences,
        interval_ticks=settings.poll_interval_ticks,
    )
    handler = ZoneRequestHandler(
        registry,
        host,
        preferences=preferences,
        namespace=settings.command_namespace,
        prefix=settings.message_prefix,
        confirmation_sound=settings.confirmation_sound or None,
    )
    return NotifierServices(
        settings=settings,
        host=host,
        kv=kv,
        registry=registry,
        locator=locator,
        tracker=tracker,
        preferences=preferences,
        poll_loop=poll_loop,
        handler=handler,
    )


def get_services(request: Request) -> NotifierServices:
    """FastAPI dependency returning the app's services."""
    return request.app.state.services
