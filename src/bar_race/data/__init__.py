"""Dataset loading: raw rows to an ordered frame sequence."""

from .frame_builder import (
    DatasetError,
    EmptyDatasetError,
    build_frames,
    clean_entity_name,
    is_aggregate_name,
    load_frames,
    load_rows,
    parse_row,
    parse_value,
)
from .records import Category, CategoryFallback, Entity, Frame, Region, resolve_category

__all__ = [
    "Category",
    "CategoryFallback",
    "DatasetError",
    "EmptyDatasetError",
    "Entity",
    "Frame",
    "Region",
    "build_frames",
    "clean_entity_name",
    "is_aggregate_name",
    "load_frames",
    "load_rows",
    "parse_row",
    "parse_value",
    "resolve_category",
]
