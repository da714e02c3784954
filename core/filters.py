import logging
import pandas as pd

from core.normalizer import UNKNOWN_BRAND

logger = logging.getLogger(__name__)

MINIMUM_PERFUMES_PER_BRAND = 10
MINIMUM_RATING_COUNT = 100


def rated_perfumes(perfumes: pd.DataFrame, min_rating_count=MINIMUM_RATING_COUNT) -> pd.DataFrame:
    """Perfumes with enough votes for their rating to be trusted."""
    if perfumes.empty:
        return perfumes.copy()
    return perfumes[perfumes['Rating_Count'] >= min_rating_count].reset_index(drop=True)


def count_perfumes_per_brand(perfumes: pd.DataFrame) -> dict:
    if perfumes.empty:
        return {}
    return perfumes.groupby('Brand', sort=False).size().to_dict()


def eligible_brands(perfumes: pd.DataFrame,
                    min_rating_count=MINIMUM_RATING_COUNT,
                    min_perfumes_per_brand=MINIMUM_PERFUMES_PER_BRAND):
    """
    Brands offered for selection, sorted alphabetically.

    A brand qualifies when it has at least `min_perfumes_per_brand` perfumes
    rated by `min_rating_count` or more people. The 'Unknown Brand' bucket
    never qualifies.
    """
    counts = count_perfumes_per_brand(rated_perfumes(perfumes, min_rating_count))

    brands = sorted(
        brand for brand, n in counts.items()
        if n >= min_perfumes_per_brand and brand != UNKNOWN_BRAND
    )

    logger.info("[FILTER] %d of %d rated brands are eligible", len(brands), len(counts))
    return brands
