# last_game/orchestration/last_game_service.py
"""
The top-level lookup flow: resolve a game, build its variables, render text.
"""

import time
from typing import Optional

import structlog

from last_game.core.template_renderer import render_template
from last_game.core.template_variables import TemplateVariableBuilder
from last_game.orchestration.game_resolver import GameResolver
from last_game.types import FormatPatterns, LookupResult, LookupStatus, TimeClass
from last_game.utils import metrics

logger = structlog.get_logger(__name__)


class LastGameService:
    """Coordinates the resolver, the variable builder and the renderer."""

    def __init__(self, resolver: GameResolver, builder: TemplateVariableBuilder):
        self._resolver = resolver
        self._builder = builder

    async def fetch_and_render(
        self,
        username: str,
        template: str,
        lookup_username: Optional[str] = None,
        time_class: Optional[TimeClass] = None,
        patterns: Optional[FormatPatterns] = None,
    ) -> LookupResult:
        """
        Renders `template` for the last game of `username`.

        Args:
            username: Player whose archives are searched.
            template: The handlebar template to render.
            lookup_username: Focus player for the template; defaults to `username`.
            time_class: Optional time class filter; None means any.
            patterns: Date/time patterns for the rendered fields.

        Returns:
            A `LookupResult`; its status is NOT_FOUND when no qualifying game
            exists (including for an empty username).

        Raises:
            ArchiveFetchError: If the API cannot be reached or answers an error.
        """
        started = time.perf_counter()
        metrics.LOOKUPS_IN_PROGRESS.inc()
        outcome = "failed"
        try:
            resolved = await self._resolver.resolve(username, time_class)
            if resolved is None:
                outcome = "not_found"
                return LookupResult(status=LookupStatus.NOT_FOUND)

            variables = await self._builder.build(resolved, lookup_username or username, patterns)
            text = render_template(template, variables)
            outcome = "found"
            return LookupResult(status=LookupStatus.FOUND, text=text, variables=variables, resolved=resolved)
        finally:
            metrics.LOOKUPS_IN_PROGRESS.dec()
            metrics.LOOKUPS_TOTAL.labels(outcome=outcome).inc()
            elapsed = time.perf_counter() - started
            metrics.LOOKUP_DURATION_SECONDS.observe(elapsed)
            logger.info("Lookup finished.", username=username, outcome=outcome,
                        time_class=time_class.value if time_class else "any",
                        duration_s=round(elapsed, 3))
