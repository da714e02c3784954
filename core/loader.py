import logging
import pandas as pd

from core.normalizer import normalize_dataset

logger = logging.getLogger(__name__)


class DataLoadError(Exception):
    """The perfume table could not be read. Nothing is loaded when this is raised."""


def read_perfume_table(source, sep=",") -> pd.DataFrame:
    """Reads the raw table as text; empty cells stay empty strings, 'NA' stays 'NA'."""
    try:
        return pd.read_csv(source, sep=sep, dtype=str, keep_default_na=False)
    except FileNotFoundError as exc:
        raise DataLoadError(f"Data file not found: {source}") from exc
    except pd.errors.EmptyDataError as exc:
        raise DataLoadError(f"Data file is empty: {source}") from exc
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise DataLoadError(f"Could not parse {source}: {exc}") from exc
    except OSError as exc:
        raise DataLoadError(f"Could not read {source}: {exc}") from exc


def load_perfume_data(source, sep=",") -> pd.DataFrame:
    raw = read_perfume_table(source, sep=sep)
    perfumes = normalize_dataset(raw)
    logger.info("[LOAD] %d perfumes loaded from %s", len(perfumes), source)
    return perfumes
