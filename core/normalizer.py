import math
import pandas as pd

UNKNOWN_BRAND = "Unknown Brand"

TEXT_COLUMNS = ['Top_Notes', 'Middle_Notes', 'Base_Notes', 'Main_Accords']
NUMERIC_COLUMNS = ['Rating_Value', 'Rating_Count']
PERFUME_COLUMNS = ['Brand'] + NUMERIC_COLUMNS + TEXT_COLUMNS


def normalize_brand(value) -> str:
    """'  maison   FRANCIS kurkdjian ' -> 'Maison Francis Kurkdjian'."""
    if value is None or (isinstance(value, float) and math.isnan(value)):
        return UNKNOWN_BRAND

    words = str(value).split()
    if not words:
        return UNKNOWN_BRAND
    return " ".join(w[:1].upper() + w[1:].lower() for w in words)


def coerce_number(value, as_int=False):
    """Parses a rating cell. Anything unparseable, negative or non-finite becomes 0."""
    try:
        number = float(str(value).strip())
    except (TypeError, ValueError):
        return 0 if as_int else 0.0

    if not math.isfinite(number) or number < 0:
        number = 0.0
    return int(number) if as_int else number


def normalize_row(row) -> dict:
    """Cleans a single raw row (column -> raw string) into a perfume record."""
    record = dict(row)
    record['Brand'] = normalize_brand(row.get('Brand'))
    record['Rating_Value'] = coerce_number(row.get('Rating_Value'))
    record['Rating_Count'] = coerce_number(row.get('Rating_Count'), as_int=True)
    for col in TEXT_COLUMNS:
        value = row.get(col)
        record[col] = value if isinstance(value, str) else ""
    return record


def normalize_dataset(raw_df: pd.DataFrame) -> pd.DataFrame:
    """
    Normalizes a whole raw table.
    Missing columns are created with their defaults; extra columns are kept.
    """
    df = raw_df.copy()
    df.columns = [str(c).strip() for c in df.columns]

    for col in PERFUME_COLUMNS:
        if col not in df.columns:
            df[col] = ""

    df['Brand'] = df['Brand'].map(normalize_brand)
    df['Rating_Value'] = df['Rating_Value'].map(coerce_number).astype(float)
    df['Rating_Count'] = df['Rating_Count'].map(
        lambda v: coerce_number(v, as_int=True)).astype(int)

    for col in TEXT_COLUMNS:
        is_text = df[col].map(lambda v: isinstance(v, str)).astype(bool)
        df[col] = df[col].where(is_text, "")

    return df.reset_index(drop=True)
