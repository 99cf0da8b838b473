"""Dependency container wiring for the application."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from food_guard.adapters.openai_ingredient_client import OpenAIIngredientClient
from food_guard.adapters.supabase_history_repository import SupabaseHistoryRepository
from food_guard.adapters.webhook_notifier import HttpxWebhookNotifier
from food_guard.config import Settings, resolve_analyzer_mode
from food_guard.domain.thresholds import InteractionTable, PatternPolicy, ThresholdTable
from food_guard.services.alerts import AlertNotifier, NullAlertNotifier
from food_guard.services.detectors.immediate import ImmediateRiskDetector
from food_guard.services.detectors.ingredients import IngredientRiskDetector
from food_guard.services.detectors.interactions import FoodDrugInteractionDetector
from food_guard.services.detectors.nutritional import NutritionalThresholdDetector
from food_guard.services.detectors.patterns import HistoricalPatternDetector
from food_guard.services.history import HistoryStore
from food_guard.services.ingredients import (
    IngredientAnalyzer,
    LlmIngredientAnalyzer,
    RuleBasedIngredientAnalyzer,
)
from food_guard.services.risk import RiskAggregator

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    risk_aggregator: RiskAggregator
    close_resources: Callable[[], Awaitable[None]]


def build_risk_aggregator(  # noqa: PLR0913
    *,
    history_store: HistoryStore,
    ingredient_analyzer: IngredientAnalyzer,
    notifier: AlertNotifier,
    thresholds: ThresholdTable | None = None,
    interactions: InteractionTable | None = None,
    policy: PatternPolicy | None = None,
    isolate_detector_failures: bool = True,
) -> RiskAggregator:
    """Assemble the aggregator with detectors in tie-break order."""
    resolved_thresholds = thresholds or ThresholdTable.default()
    return RiskAggregator(
        detectors=[
            ImmediateRiskDetector(resolved_thresholds),
            IngredientRiskDetector(ingredient_analyzer),
            NutritionalThresholdDetector(resolved_thresholds),
            HistoricalPatternDetector(
                store=history_store,
                thresholds=resolved_thresholds,
                policy=policy or PatternPolicy(),
            ),
            FoodDrugInteractionDetector(interactions or InteractionTable.default()),
        ],
        notifier=notifier,
        isolate_detector_failures=isolate_detector_failures,
    )


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    history_store = SupabaseHistoryRepository(supabase_client)

    openai_client: OpenAIIngredientClient | None = None
    analyzer: IngredientAnalyzer
    mode = resolve_analyzer_mode(resolved_settings)
    if mode == "openai" and resolved_settings.openai_api_key:
        openai_client = OpenAIIngredientClient.create(resolved_settings.openai_api_key)
        analyzer = LlmIngredientAnalyzer(
            client=openai_client,
            model=resolved_settings.openai_model,
            reasoning_effort=resolved_settings.openai_reasoning_effort,
            store=resolved_settings.openai_store,
        )
    else:
        if resolved_settings.ingredient_analyzer.strip().lower() != mode:
            _logger.warning("OpenAI key missing; using rule-based ingredient analyzer")
        analyzer = RuleBasedIngredientAnalyzer()

    webhook_notifier: HttpxWebhookNotifier | None = None
    notifier: AlertNotifier = NullAlertNotifier()
    if resolved_settings.alert_webhook_url:
        webhook_notifier = HttpxWebhookNotifier.create(
            url=resolved_settings.alert_webhook_url,
            secret=resolved_settings.alert_webhook_secret,
        )
        notifier = webhook_notifier

    risk_aggregator = build_risk_aggregator(
        history_store=history_store,
        ingredient_analyzer=analyzer,
        notifier=notifier,
        policy=PatternPolicy(
            history_timeout_seconds=resolved_settings.history_timeout_seconds
        ),
        isolate_detector_failures=resolved_settings.isolate_detector_failures,
    )

    async def close_resources() -> None:
        await risk_aggregator.flush_alerts()
        if webhook_notifier is not None:
            await webhook_notifier.close()
        if openai_client is not None:
            await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        risk_aggregator=risk_aggregator,
        close_resources=close_resources,
    )
