"""Application configuration with environment-specific profiles.

Supports dev, staging, production and test environments via APP_ENV.
All values can be overridden by environment variables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache

from runpace.constants import (
    ALTITUDE_NOISE_THRESHOLD_M,
    DEFAULT_REFERENCE_AGE,
    DEFAULT_RUNNER_WEIGHT_KG,
    REFERENCE_PACE_SEC_PER_KM,
)


@dataclass(frozen=True)
class Settings:
    """Immutable application settings resolved from environment."""

    app_env: str = "dev"
    log_level: str = "INFO"

    # Engine defaults (see runpace.constants)
    default_runner_weight_kg: float = DEFAULT_RUNNER_WEIGHT_KG
    default_reference_age: int = DEFAULT_REFERENCE_AGE
    reference_pace_sec_per_km: float = REFERENCE_PACE_SEC_PER_KM
    altitude_noise_threshold_m: float = ALTITUDE_NOISE_THRESHOLD_M

    # Static lookup tables; None means use the bundled reference tables
    heat_grid_path: str | None = None
    age_grade_path: str | None = None
    cv_model_path: str | None = None

    # HTTP surface
    cors_origins: tuple[str, ...] = field(default_factory=lambda: ("http://localhost:5173",))
    request_id_header_name: str = "X-Request-ID"
    rate_limit_enabled: bool = True
    rate_limit_storage_uri: str = "memory://"
    compute_rate_limit: str = "60/minute"
    cache_prefix: str = "runpace"
    cache_expire_seconds: int = 300

    @property
    def is_production(self) -> bool:
        return self.app_env == "production"

    @property
    def is_dev(self) -> bool:
        return self.app_env == "dev"


# -- Environment profiles --

_ENV_PROFILES: dict[str, dict] = {
    "dev": {
        "log_level": "DEBUG",
        "compute_rate_limit": "600/minute",
    },
    "staging": {
        "log_level": "INFO",
        "compute_rate_limit": "120/minute",
    },
    "production": {
        "log_level": "WARNING",
        "compute_rate_limit": "60/minute",
        "cache_expire_seconds": 3600,
    },
    "test": {
        "log_level": "WARNING",
        "rate_limit_enabled": False,
    },
}


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _env_path(name: str) -> str | None:
    raw = (os.getenv(name) or "").strip()
    return raw or None


def _cors_origins() -> tuple[str, ...]:
    raw = os.getenv("CORS_ORIGINS", "http://localhost:5173")
    return tuple(origin.strip() for origin in raw.split(",") if origin.strip())


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Build Settings by merging environment profile with env-var overrides."""
    app_env = os.getenv("APP_ENV", "dev")
    profile = _ENV_PROFILES.get(app_env, _ENV_PROFILES["dev"])

    return Settings(
        app_env=app_env,
        log_level=os.getenv("LOG_LEVEL", profile.get("log_level", "INFO")),
        default_runner_weight_kg=float(os.getenv("DEFAULT_RUNNER_WEIGHT_KG", str(DEFAULT_RUNNER_WEIGHT_KG))),
        default_reference_age=int(os.getenv("DEFAULT_REFERENCE_AGE", str(DEFAULT_REFERENCE_AGE))),
        reference_pace_sec_per_km=float(os.getenv("REFERENCE_PACE_SEC_PER_KM", str(REFERENCE_PACE_SEC_PER_KM))),
        altitude_noise_threshold_m=float(os.getenv("ALTITUDE_NOISE_THRESHOLD_M", str(ALTITUDE_NOISE_THRESHOLD_M))),
        heat_grid_path=_env_path("HEAT_GRID_PATH"),
        age_grade_path=_env_path("AGE_GRADE_PATH"),
        cv_model_path=_env_path("CV_MODEL_PATH"),
        cors_origins=_cors_origins(),
        request_id_header_name=os.getenv("REQUEST_ID_HEADER_NAME", "X-Request-ID"),
        rate_limit_enabled=_env_flag("RATE_LIMIT_ENABLED", profile.get("rate_limit_enabled", True)),
        rate_limit_storage_uri=os.getenv("RATE_LIMIT_STORAGE_URI", "memory://"),
        compute_rate_limit=os.getenv("COMPUTE_RATE_LIMIT", profile.get("compute_rate_limit", "60/minute")),
        cache_prefix=os.getenv("CACHE_PREFIX", "runpace"),
        cache_expire_seconds=int(os.getenv("CACHE_EXPIRE_SECONDS", str(profile.get("cache_expire_seconds", 300)))),
    )
