import logging
import os
from typing import NamedTuple

from dotenv import load_dotenv

logger = logging.getLogger(__name__)


class Settings(NamedTuple):
    csv_path: str = "parfumo_data.csv"
    min_perfumes_per_brand: int = 10
    min_rating_count: int = 100
    min_ingredient_appearances: int = 100
    high_stdev_threshold: float = 0.60
    low_stdev_threshold: float = 0.60
    top_n_notes: int = 4
    top_n_accords: int = 5


# env var -> (settings field, parser)
ENV_FIELDS = {
    "SCENT_DNA_CSV_PATH": ("csv_path", str),
    "MINIMUM_PERFUMES_PER_BRAND": ("min_perfumes_per_brand", int),
    "MINIMUM_RATING_COUNT": ("min_rating_count", int),
    "MINIMUM_INGREDIENT_APPEARANCES": ("min_ingredient_appearances", int),
    "HIGH_STDEV_THRESHOLD": ("high_stdev_threshold", float),
    "LOW_STDEV_THRESHOLD": ("low_stdev_threshold", float),
    "TOP_N_NOTES": ("top_n_notes", int),
    "TOP_N_ACCORDS": ("top_n_accords", int),
}


def load_settings(env_file=None) -> Settings:
    """Reads the thresholds from the environment (and .env, if present)."""
    load_dotenv(env_file)

    overrides = {}
    for env_name, (field, cast) in ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is None or not raw.strip():
            continue
        try:
            overrides[field] = cast(raw.strip())
        except ValueError:
            logger.warning(
                "[CONFIG] Invalid value for %s=%r, keeping default %r",
                env_name, raw, Settings._field_defaults[field])

    return Settings(**overrides)
