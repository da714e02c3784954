import pandas as pd
import pytest

from core.normalizer import normalize_dataset
from core.profile import (
    EMPTY_LABEL, brand_affinity, empty_profile, get_brand_scent_profile, is_empty_profile,
)

FIELDS = ["top_notes", "middle_notes", "base_notes", "main_accords"]


def test_three_perfume_example(perfumes):
    profile = get_brand_scent_profile(perfumes, "Branda")
    top = profile["top_notes"]

    assert list(top["proportions"]) == ["rose", "musk"]
    assert top["proportions"]["rose"] == pytest.approx(200 / 3)
    assert top["proportions"]["musk"] == pytest.approx(100 / 3)

    assert top["customdata"][0] == {
        "type": "Top Note", "label": "Rose", "percentage": pytest.approx(200 / 3), "id": "top_rose_0",
    }
    assert top["customdata"][1]["id"] == "top_musk_1"


def test_unknown_brand_returns_placeholders(perfumes):
    profile = get_brand_scent_profile(perfumes, "Nobody")

    assert set(profile) == set(FIELDS)
    assert profile["top_notes"]["proportions"] == {EMPTY_LABEL: 100.0}
    assert profile["top_notes"]["customdata"][0]["id"] == "top_na_0"
    assert profile["middle_notes"]["customdata"][0]["id"] == "middle_na_0"
    assert profile["base_notes"]["customdata"][0]["id"] == "base_na_0"
    assert profile["main_accords"]["customdata"][0]["id"] == "accord_na_0"


def test_field_without_tokens_is_placeholder(perfumes):
    profile = get_brand_scent_profile(perfumes, "Branda")
    assert profile["base_notes"] == empty_profile("base")
    assert is_empty_profile(profile["base_notes"])
    assert not is_empty_profile(profile["top_notes"])


def test_percentages_sum_to_100(catalog):
    for brand in ["Dior", "Chanel", "Unknown Brand"]:
        profile = get_brand_scent_profile(catalog, brand)
        for field in FIELDS:
            total = sum(profile[field]["proportions"].values())
            assert total == pytest.approx(100.0)


def test_top_n_limits_and_shares_are_over_retained(perfume_row):
    rows = [
        perfume_row("x", 4, 1, top="a, b, c, d, e", accords="w, v, u, t, s, r"),
        perfume_row("x", 4, 1, top="a, b"),
    ]
    df = normalize_dataset(pd.DataFrame(rows))
    profile = get_brand_scent_profile(df, "X", top_n_notes=4, top_n_accords=5)

    top = profile["top_notes"]["proportions"]
    assert list(top) == ["a", "b", "c", "d"]
    # counts 2, 2, 1, 1 over a retained total of 6
    assert top["a"] == pytest.approx(200 / 6)
    assert top["d"] == pytest.approx(100 / 6)

    assert len(profile["main_accords"]["proportions"]) == 5
    assert profile["main_accords"]["customdata"][0]["type"] == "Accord"


def test_counts_are_not_deduplicated_per_perfume(perfume_row):
    df = normalize_dataset(pd.DataFrame([perfume_row("x", 4, 1, middle="Rose, rose, Iris")]))
    middle = get_brand_scent_profile(df, "X")["middle_notes"]["proportions"]
    assert middle["rose"] == pytest.approx(200 / 3)


def test_ids_use_hyphens_for_spaces(perfume_row):
    df = normalize_dataset(pd.DataFrame([perfume_row("x", 4, 1, base="Tonka  Bean")]))
    item = get_brand_scent_profile(df, "X")["base_notes"]["customdata"][0]
    assert item["label"] == "Tonka  bean"
    assert item["id"] == "base_tonka-bean_0"


def test_brand_match_is_exact(catalog):
    profile = get_brand_scent_profile(catalog, "dior")
    assert is_empty_profile(profile["top_notes"])


def test_profile_is_deterministic(catalog):
    first = get_brand_scent_profile(catalog, "Dior")
    second = get_brand_scent_profile(catalog, "Dior")
    assert first == second


def test_profile_on_empty_dataset():
    empty = normalize_dataset(pd.DataFrame())
    profile = get_brand_scent_profile(empty, "Dior")
    assert all(is_empty_profile(profile[f]) for f in FIELDS)


def test_brand_affinity_substring(catalog):
    # 2 of the 3 Dior perfumes mention musk somewhere
    assert brand_affinity(catalog, "Dior", "Musk") == pytest.approx(200 / 3)
    assert brand_affinity(catalog, "Dior", "oud") == 0.0
    assert brand_affinity(catalog, "Nobody", "musk") == 0.0


def test_brand_affinity_matches_inside_words(perfume_row):
    df = normalize_dataset(pd.DataFrame([perfume_row("x", 4, 1, top="Roseapple")]))
    assert brand_affinity(df, "X", "rose") == 100.0
