import logging
import pandas as pd

from infra.config import Settings
from core.filters import eligible_brands, rated_perfumes
from core.ingredient_stats import brand_percentile, build_ingredient_stats, classify_variance
from core.loader import load_perfume_data
from core.normalizer import normalize_dataset
from core.profile import brand_affinity, get_brand_scent_profile

logger = logging.getLogger(__name__)


class ScentSnapshot:
    """
    Everything derived from one load of the perfume table.
    Built in full before it is published and never mutated afterwards.
    """

    def __init__(self, perfumes: pd.DataFrame, settings: Settings):
        self.settings = settings
        self.perfumes = perfumes
        self.rated = rated_perfumes(perfumes, settings.min_rating_count)
        self.brands = eligible_brands(
            perfumes,
            min_rating_count=settings.min_rating_count,
            min_perfumes_per_brand=settings.min_perfumes_per_brand,
        )
        self.ingredient_stats = build_ingredient_stats(
            self.rated, min_appearances=settings.min_ingredient_appearances)

    def __len__(self):
        return len(self.perfumes)


class ScentDnaEngine:

    def __init__(self, settings: Settings = None):
        self.settings = settings or Settings()
        self._snapshot = None

    @property
    def is_loaded(self):
        return self._snapshot is not None

    @property
    def snapshot(self) -> ScentSnapshot:
        if self._snapshot is None:
            raise RuntimeError("Perfume data not loaded; call load() first")
        return self._snapshot

    @property
    def brands(self):
        return list(self.snapshot.brands)

    def load(self, source=None):
        """Loads the table and swaps in a complete new snapshot. Raises DataLoadError."""
        source = source or self.settings.csv_path
        try:
            perfumes = load_perfume_data(source)
        except Exception:
            logger.exception("[LOAD] Failed to load %s", source)
            raise
        return self._publish(perfumes)

    def load_frame(self, raw_df: pd.DataFrame):
        """Same as load(), from rows already in memory."""
        return self._publish(normalize_dataset(raw_df))

    def _publish(self, perfumes):
        snapshot = ScentSnapshot(perfumes, self.settings)
        if not snapshot.brands:
            logger.warning(
                "[FILTER] No brand has %d+ perfumes with %d+ ratings",
                self.settings.min_perfumes_per_brand, self.settings.min_rating_count)
        self._snapshot = snapshot
        return snapshot

    def select_brand(self, brand_name):
        snap = self.snapshot
        return get_brand_scent_profile(
            snap.perfumes, brand_name,
            top_n_notes=self.settings.top_n_notes,
            top_n_accords=self.settings.top_n_accords,
        )

    def inspect_ingredient(self, brand_name, label):
        """Comparative numbers shown when hovering an ingredient of `brand_name`."""
        snap = self.snapshot
        ingredient = str(label).lower()
        entry = snap.ingredient_stats.get(ingredient)

        return {
            "ingredient": ingredient,
            "brand_affinity": brand_affinity(snap.perfumes, brand_name, ingredient),
            "percentile": brand_percentile(entry, brand_name),
            "brand_avg_rating": entry["brand_ratings"].get(brand_name) if entry else None,
            "global_avg_rating": entry["global_avg_rating"] if entry else None,
            "rating_stdev": entry["rating_stdev"] if entry else None,
            "variance": classify_variance(
                entry["rating_stdev"],
                high=self.settings.high_stdev_threshold,
                low=self.settings.low_stdev_threshold,
            ) if entry else None,
        }
