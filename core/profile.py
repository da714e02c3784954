import logging
import re
from collections import Counter

import pandas as pd

from core.normalizer import TEXT_COLUMNS
from core.tokenizer import tokenize

logger = logging.getLogger(__name__)

EMPTY_LABEL = "N/A"

# profile key -> (column, display type, id prefix)
PROFILE_FIELDS = {
    "top_notes": ('Top_Notes', "Top Note", "top"),
    "middle_notes": ('Middle_Notes', "Middle Note", "middle"),
    "base_notes": ('Base_Notes', "Base Note", "base"),
    "main_accords": ('Main_Accords', "Accord", "accord"),
}

WHITESPACE = re.compile(r"\s+")


def empty_profile(id_prefix):
    return {
        "proportions": {EMPTY_LABEL: 100.0},
        "customdata": [{
            "type": EMPTY_LABEL,
            "label": EMPTY_LABEL,
            "percentage": 100.0,
            "id": f"{id_prefix}_na_0",
        }],
    }


def is_empty_profile(field_profile) -> bool:
    data = field_profile.get("customdata") or []
    return not data or data[0]["type"] == EMPTY_LABEL


def _field_proportions(brand_df, column, top_n, type_name, id_prefix):
    all_items = []
    for value in brand_df[column]:
        all_items.extend(tokenize(value))

    if not all_items:
        return empty_profile(id_prefix)

    # most_common keeps first-seen order between equal counts
    top_items = Counter(all_items).most_common(top_n)
    total_count = sum(count for _, count in top_items)
    if total_count == 0:
        return empty_profile(id_prefix)

    proportions = {item: count / total_count * 100 for item, count in top_items}
    customdata = [
        {
            "type": type_name,
            "label": item[:1].upper() + item[1:],
            "percentage": percentage,
            "id": f"{id_prefix}_{WHITESPACE.sub('-', item)}_{i}",
        }
        for i, (item, percentage) in enumerate(proportions.items())
    ]
    return {"proportions": proportions, "customdata": customdata}


def get_brand_scent_profile(perfumes: pd.DataFrame, brand_name, top_n_notes=4, top_n_accords=5):
    """
    Top-N note and accord shares of one brand, computed over its whole catalog.

    Shares are relative to the retained top-N items, so each field sums to 100.
    Fields with nothing usable collapse to the {"N/A": 100.0} placeholder.
    """
    if perfumes.empty:
        brand_df = perfumes
    else:
        brand_df = perfumes[perfumes['Brand'] == brand_name]

    logger.debug("[PROFILE] %s: %d perfumes", brand_name, len(brand_df))

    profile = {}
    for key, (column, type_name, id_prefix) in PROFILE_FIELDS.items():
        if brand_df.empty or column not in brand_df.columns:
            profile[key] = empty_profile(id_prefix)
            continue
        top_n = top_n_accords if key == "main_accords" else top_n_notes
        profile[key] = _field_proportions(brand_df, column, top_n, type_name, id_prefix)

    return profile


def brand_affinity(perfumes: pd.DataFrame, brand_name, ingredient) -> float:
    """
    Percent of the brand's perfumes that mention `ingredient` in any field.

    Matching is a plain substring test on the lowercased field text, so
    'rose' also counts a perfume listing 'roseapple'.
    """
    if perfumes.empty:
        return 0.0

    brand_df = perfumes[perfumes['Brand'] == brand_name]
    if brand_df.empty:
        return 0.0

    needle = str(ingredient).lower()
    hits = 0
    for _, row in brand_df.iterrows():
        if any(needle in str(row.get(col, "") or "").lower() for col in TEXT_COLUMNS):
            hits += 1

    return hits / len(brand_df) * 100
