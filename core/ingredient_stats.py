import logging
from collections import defaultdict

import numpy as np
import pandas as pd
from scipy.stats import percentileofscore

from core.tokenizer import unique_ingredients

logger = logging.getLogger(__name__)

MINIMUM_INGREDIENT_APPEARANCES = 100
HIGH_STDEV_THRESHOLD = 0.60
LOW_STDEV_THRESHOLD = 0.60


def _group_by_ingredient(perfumes: pd.DataFrame):
    """ingredient -> [(brand, rating), ...], each perfume counted once per ingredient."""
    members = defaultdict(list)
    for record in perfumes.to_dict('records'):
        brand = record['Brand']
        rating = float(record['Rating_Value'])
        for ingredient in unique_ingredients(record):
            members[ingredient].append((brand, rating))
    return members


def _summarize(entries):
    ratings = np.array([rating for _, rating in entries], dtype=float)

    by_brand = defaultdict(list)
    for brand, rating in entries:
        by_brand[brand].append(rating)

    brand_ratings = {brand: float(np.mean(values)) for brand, values in by_brand.items()}

    # sample deviation; undefined for a single rating
    stdev = float(np.std(ratings, ddof=1)) if len(ratings) > 1 else None

    return {
        "global_avg_rating": float(np.mean(ratings)),
        "rating_stdev": stdev,
        "brand_ratings": brand_ratings,
        "sorted_brand_avg_ratings": sorted(brand_ratings.values()),
        "appearances": len(entries),
    }


def build_ingredient_stats(perfumes: pd.DataFrame, min_appearances=MINIMUM_INGREDIENT_APPEARANCES):
    """
    Cross-brand rating statistics for every ingredient used by at least
    `min_appearances` perfumes.

    Expects the rating-count filtered dataset. The global mean and deviation
    are taken over perfumes, not over the per-brand means.
    """
    if perfumes.empty:
        return {}

    members = _group_by_ingredient(perfumes)

    stats = {
        ingredient: _summarize(entries)
        for ingredient, entries in members.items()
        if len(entries) >= min_appearances
    }

    logger.info("[STATS] %d of %d ingredients reach %d appearances",
                len(stats), len(members), min_appearances)
    return stats


def percentile_rank(brand_avg_rating, sorted_ratings):
    """Share (0-100) of brands whose mean is strictly below `brand_avg_rating`."""
    if sorted_ratings is None or len(sorted_ratings) <= 1:
        return None
    return float(percentileofscore(sorted_ratings, brand_avg_rating, kind='strict'))


def brand_percentile(entry, brand):
    if not entry or brand not in entry["brand_ratings"]:
        return None
    return percentile_rank(entry["brand_ratings"][brand], entry["sorted_brand_avg_ratings"])


def classify_variance(stdev, high=HIGH_STDEV_THRESHOLD, low=LOW_STDEV_THRESHOLD):
    """'divisive' / 'consistent' label for an ingredient's rating spread."""
    if not stdev:
        return None
    if stdev > high:
        return "divisive"
    if stdev <= low:
        return "consistent"
    return None
