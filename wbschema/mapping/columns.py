"""Column registry: describe the columns of a tabular dataset."""

from __future__ import annotations

from pathlib import Path

import pandas as pd

from .models import ColumnInfo


def native_type_for(dtype) -> str:
    """Map a pandas dtype onto the native column type names used for compatibility checks."""
    if pd.api.types.is_bool_dtype(dtype):
        return "BOOLEAN"
    if pd.api.types.is_integer_dtype(dtype):
        return "INTEGER"
    if pd.api.types.is_float_dtype(dtype):
        return "DOUBLE"
    if pd.api.types.is_datetime64_any_dtype(dtype):
        return "TIMESTAMP"
    return "VARCHAR"


def columns_from_dataframe(dataframe: pd.DataFrame, sample_size: int = 5) -> list[ColumnInfo]:
    columns: list[ColumnInfo] = []
    for name in dataframe.columns:
        series = dataframe[name]
        non_null = series.dropna()
        columns.append(
            ColumnInfo(
                name=str(name),
                data_type=native_type_for(series.dtype),
                sample_values=[str(value) for value in non_null.head(sample_size).tolist()],
                nullable=bool(series.isna().any()),
                unique_count=int(non_null.nunique()),
            )
        )
    return columns


def read_columns(
    csv_path: str | Path,
    encoding: str = "utf-8",
    delimiter: str = ",",
    decimal_separator: str = ".",
    sample_size: int = 5,
) -> list[ColumnInfo]:
    """Read a CSV file and describe its columns.

    Raises:
        FileNotFoundError: If the CSV file doesn't exist
    """
    csv_file = Path(csv_path)
    if not csv_file.exists():
        raise FileNotFoundError(f"CSV file not found: {csv_path}")

    dataframe = pd.read_csv(
        csv_file,
        encoding=encoding,
        delimiter=delimiter,
        decimal=decimal_separator,
    )
    return columns_from_dataframe(dataframe, sample_size=sample_size)
