import logging

import pandas as pd
import streamlit as st

from infra.config import load_settings
from core.dna import ScentDnaEngine
from core.loader import DataLoadError
from core.renderer import build_dna_figure
from core.profile import PROFILE_FIELDS, is_empty_profile

logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

st.set_page_config(
    page_title="Scent DNA",
    page_icon="🧴",
    layout="wide"
)

# =========================================================
# 1. RESOURCE CACHE
# =========================================================
@st.cache_resource
def load_engine():
    settings = load_settings()
    engine = ScentDnaEngine(settings)
    engine.load()
    return engine

try:
    engine = load_engine()
except DataLoadError as e:
    st.error(f"Error: could not load data. Please check the file path ({e}).")
    st.stop()

settings = engine.settings

# =========================================================
# 2. BRAND SELECTION
# =========================================================
st.title("🧴 Perfume DNA")
st.markdown("The notes and accords a brand reaches for most, and how its perfumes "
            "rate against other brands using the same ingredients.")

brands = engine.brands
if not brands:
    st.info(
        "No brands meet the required data quality standards, namely at least "
        f"{settings.min_perfumes_per_brand} perfumes with "
        f"{settings.min_rating_count}+ ratings each."
    )
    st.stop()

with st.sidebar:
    st.header("🎛️ Brand")
    selected_brand = st.selectbox("Brand", options=brands, index=0)
    st.caption(f"{len(brands)} brands with {settings.min_perfumes_per_brand}+ "
               f"perfumes rated by {settings.min_rating_count}+ people.")

# =========================================================
# 3. VISUALIZATION
# =========================================================
profile = engine.select_brand(selected_brand)

fig = build_dna_figure(
    profile,
    describe=lambda item: engine.inspect_ingredient(selected_brand, item["label"]),
    title=selected_brand,
)
st.plotly_chart(fig, use_container_width=False)

# =========================================================
# 4. INGREDIENT INSPECTOR
# =========================================================
with st.expander("Ingredient statistics (table)"):
    rows = []
    for key in PROFILE_FIELDS:
        field_profile = profile[key]
        if is_empty_profile(field_profile):
            continue
        for item in field_profile["customdata"]:
            details = engine.inspect_ingredient(selected_brand, item["label"])
            rows.append({
                "Type": item["type"],
                "Ingredient": item["label"],
                "Share (%)": round(item["percentage"], 1),
                "Brand affinity (%)": round(details["brand_affinity"], 0),
                "Brand avg rating": details["brand_avg_rating"],
                "Global avg rating": details["global_avg_rating"],
                "Rating stdev": details["rating_stdev"],
                "Percentile": details["percentile"],
            })

    if rows:
        st.dataframe(pd.DataFrame(rows), hide_index=True, use_container_width=True)
    else:
        st.text("No ingredient data for this brand.")
