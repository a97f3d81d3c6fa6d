"""Dependency container wiring for the application."""

import logging
from dataclasses import dataclass
from pathlib import Path

from supabase import create_client

from keto_tracker.adapters.json_store import JsonFileStore
from keto_tracker.adapters.local_fasting_repository import (
    LocalFastingSessionRepository,
)
from keto_tracker.adapters.local_food_entry_repository import (
    LocalFoodEntryRepository,
)
from keto_tracker.adapters.local_profile_repository import LocalProfileRepository
from keto_tracker.adapters.supabase_fasting_repository import (
    SupabaseFastingSessionRepository,
)
from keto_tracker.adapters.supabase_food_entry_repository import (
    SupabaseFoodEntryRepository,
)
from keto_tracker.adapters.supabase_profile_repository import (
    SupabaseProfileRepository,
)
from keto_tracker.config import Settings, StorageBackend, require_supabase_credentials
from keto_tracker.services.fasting import FastingService
from keto_tracker.services.food_log import FoodLogService
from keto_tracker.services.profiles import ProfileService

_logger = logging.getLogger(__name__)


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    profile_service: ProfileService
    food_log_service: FoodLogService
    fasting_service: FastingService


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container.

    The storage backend is chosen here, once, from ``settings.storage_backend``.
    """
    resolved_settings = settings or Settings()
    if resolved_settings.storage_backend == StorageBackend.SUPABASE:
        supabase_url, supabase_key = require_supabase_credentials(resolved_settings)
        supabase_client = create_client(supabase_url, supabase_key)
        profile_repository = SupabaseProfileRepository(supabase_client)
        food_entry_repository = SupabaseFoodEntryRepository(supabase_client)
        fasting_repository = SupabaseFastingSessionRepository(supabase_client)
    else:
        store = JsonFileStore(Path(resolved_settings.local_storage_path))
        profile_repository = LocalProfileRepository(store)
        food_entry_repository = LocalFoodEntryRepository(store)
        fasting_repository = LocalFastingSessionRepository(store)
    _logger.info("Using %s storage backend", resolved_settings.storage_backend)

    return AppContainer(
        settings=resolved_settings,
        profile_service=ProfileService(profile_repository),
        food_log_service=FoodLogService(food_entry_repository),
        fasting_service=FastingService(fasting_repository),
    )
