import pandas as pd
import pytest

from infra.config import Settings
from core.normalizer import normalize_dataset


def make_perfume(brand, rating, count, top="", middle="", base="", accords=""):
    return {
        "Brand": brand,
        "Rating_Value": str(rating),
        "Rating_Count": str(count),
        "Top_Notes": top,
        "Middle_Notes": middle,
        "Base_Notes": base,
        "Main_Accords": accords,
    }


@pytest.fixture
def raw_perfumes():
    return pd.DataFrame([
        make_perfume("BrandA", 4.0, 150, top="Rose, Musk"),
        make_perfume("BrandA", 4.5, 150, top="Rose"),
        make_perfume("BrandB", 3.0, 150, top="Musk"),
    ])


@pytest.fixture
def perfumes(raw_perfumes):
    return normalize_dataset(raw_perfumes)


@pytest.fixture
def catalog():
    """Two brands with full note pyramids; Dior has a low-rated outlier."""
    rows = [
        make_perfume("dior", 4.2, 500, top="Bergamot, Lemon", middle="Rose, Jasmine",
                     base="Musk, Amber", accords="citrus, floral, musky"),
        make_perfume("dior", 3.8, 300, top="Bergamot", middle="Rose",
                     base="Patchouli, Musk", accords="floral, woody"),
        make_perfume("dior", 2.0, 40, top="Pink Pepper, Bergamot", middle="NA",
                     base="Vanilla", accords="sweet, floral"),
        make_perfume("chanel", 4.6, 800, top="Aldehydes, Bergamot", middle="Rose, Iris",
                     base="Musk, Sandalwood", accords="aldehydic, floral, powdery"),
        make_perfume("chanel", 4.0, 120, top="Lemon", middle="Jasmine",
                     base="Musk", accords="citrus, floral"),
        make_perfume("", 3.5, 200, top="Rose", middle="", base="Musk", accords="floral"),
    ]
    return normalize_dataset(pd.DataFrame(rows))


@pytest.fixture
def low_settings():
    return Settings(
        min_perfumes_per_brand=2,
        min_rating_count=100,
        min_ingredient_appearances=2,
    )


@pytest.fixture
def perfume_row():
    return make_perfume
