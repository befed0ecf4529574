"""
Emission source loading.

Sources arrive as tabular rows with the columns
``name, x, y, emission_rate, category, height``. Numeric columns that are
missing or cannot be parsed default to 0 and rows without a name are
dropped before anything reaches the models.
"""

import json
import logging
from pathlib import Path
from typing import List, Optional, Union

import numpy as np
import pandas as pd

from ..core.emission_model import EmissionSource
from ..utils.geo_utils import lat_lon_to_meters

logger = logging.getLogger(__name__)

NUMERIC_COLUMNS = ['x', 'y', 'emission_rate', 'height']
TEXT_COLUMNS = ['name', 'category']


def _project_lat_lon(df: pd.DataFrame) -> pd.DataFrame:
    """Fill x/y from lat/lon columns, relative to the south-west corner of the data."""
    lat = pd.to_numeric(df['lat'], errors='coerce')
    lon = pd.to_numeric(df['lon'], errors='coerce')
    center_lat = lat.mean()
    if np.isnan(center_lat):
        return df

    x, y = lat_lon_to_meters(lat.to_numpy(), lon.to_numpy(), center_lat)
    x0, y0 = lat_lon_to_meters(lat.min(), lon.min(), center_lat)
    df = df.copy()
    df['x'] = x - x0
    df['y'] = y - y0
    return df


def sources_from_dataframe(df: pd.DataFrame) -> List[EmissionSource]:
    """Convert a table of source rows to EmissionSource objects.

    Args:
        df: DataFrame with (a subset of) the source columns. If ``x``/``y``
            are absent but ``lat``/``lon`` are present, positions are
            projected to metres.

    Returns:
        List of sources, in row order, for rows with a non-empty name
    """
    if df is None or df.empty:
        return []

    if not {'x', 'y'} <= set(df.columns) and {'lat', 'lon'} <= set(df.columns):
        df = _project_lat_lon(df)

    df = df.copy()
    for column in NUMERIC_COLUMNS:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors='coerce').fillna(0.0)
        else:
            df[column] = 0.0
    # Stack heights are whole metres
    df['height'] = np.trunc(df['height'])

    for column in TEXT_COLUMNS:
        if column in df.columns:
            df[column] = df[column].fillna('').astype(str).str.strip()
        else:
            df[column] = ''

    df = df[df['name'] != '']
    return [EmissionSource.from_record(row) for row in df.to_dict('records')]


def load_sources_from_csv(filename: Union[str, Path]) -> List[EmissionSource]:
    """Load emission sources from a CSV file.
    
    Args:
        filename: Path to the CSV file (header row required)
        
    Returns:
        List of emission sources, or an empty list if the file cannot be read
    """
    try:
        df = pd.read_csv(filename, skipinitialspace=True)
    except Exception as e:
        logger.error(f"Error reading emission sources file {filename}: {e}")
        return []

    sources = sources_from_dataframe(df)
    logger.info(f"Loaded {len(sources)} emission sources from {filename}")
    return sources


def load_sources_from_json(filename: Union[str, Path]) -> List[EmissionSource]:
    """Load emission sources from a JSON file holding a list of row objects."""
    try:
        with open(filename, 'r') as f:
            records = json.load(f)
    except Exception as e:
        logger.error(f"Error reading emission sources file {filename}: {e}")
        return []

    if isinstance(records, dict):
        records = records.get('sources', [])
    if not isinstance(records, list):
        logger.error(f"Expected a list of sources in {filename}")
        return []

    return sources_from_dataframe(pd.DataFrame.from_records(records))
