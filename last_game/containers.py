# last_game/containers.py
"""
Defines the Dependency Injection (DI) container for the application.

This module uses the `punq` library to manage the creation and wiring of the
API client, the archive traversals and the lookup service. Centralizing the
dependency graph keeps the CLI thin and lets tests swap any single piece.
"""

from typing import Optional

import httpx
import punq

from last_game.config.settings import AppSettings
from last_game.core.template_variables import TemplateVariableBuilder
from last_game.orchestration.archive_walker import ArchiveWalker
from last_game.orchestration.game_resolver import GameResolver
from last_game.orchestration.last_game_service import LastGameService
from last_game.orchestration.previous_game_finder import PreviousGameFinder
from last_game.services.chesscom_client import ChessComClient
from last_game.services.preferences_store import PreferencesStore


def get_container(
    app_settings: AppSettings,
    preferences_store: PreferencesStore,
    http_client: Optional[httpx.AsyncClient] = None,
) -> punq.Container:
    """
    Initializes and returns a DI container for one CLI invocation.

    Args:
        app_settings: Process-level settings.
        preferences_store: The store used to load and save user preferences.
        http_client: Optional HTTP client handed to `ChessComClient` (tests).
    """
    container = punq.Container()

    # Register instances that are created outside the container's control.
    container.register(AppSettings, instance=app_settings)
    container.register(PreferencesStore, instance=preferences_store)

    # A single client per container so every traversal shares one connection pool.
    container.register(
        ChessComClient, factory=lambda: ChessComClient(app_settings, http_client), scope=punq.Scope.singleton
    )
    container.register(ArchiveWalker, factory=lambda: ArchiveWalker(container.resolve(ChessComClient)))
    container.register(GameResolver)  # Depends on ArchiveWalker
    container.register(PreviousGameFinder)  # Depends on ArchiveWalker
    container.register(
        TemplateVariableBuilder,
        factory=lambda: TemplateVariableBuilder(
            container.resolve(PreviousGameFinder), app_settings.profile_base_url
        ),
    )
    container.register(LastGameService)  # Depends on GameResolver and TemplateVariableBuilder

    return container
