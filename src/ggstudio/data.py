from typing import Any, Mapping

import numpy as np


def field_names(table: Any) -> frozenset[str]:
    """
    Column names of a data table.

    Supported shapes: a list of dict records, a dict of columns, a numpy
    structured array, or anything with a `columns` attribute (eg. a pandas DataFrame).
    """
    if isinstance(table, np.ndarray):
        if table.dtype.names is None:
            raise TypeError("numpy arrays must be structured (have named fields)")
        return frozenset(table.dtype.names)
    if hasattr(table, "columns"):
        return frozenset(str(c) for c in table.columns)
    if isinstance(table, Mapping):
        return frozenset(table.keys())
    if isinstance(table, (list, tuple)):
        names: set[str] = set()
        for i, row in enumerate(table):
            if not isinstance(row, Mapping):
                raise TypeError(
                    f"Expected a dict record at row {i}, got {type(row).__name__}"
                )
            names.update(row.keys())
        return frozenset(names)
    raise TypeError(f"Unsupported data table: {type(table).__name__}")


def to_records(table: Any) -> list[dict[str, Any]]:
    """Normalize a data table to a list of dict records."""
    if isinstance(table, np.ndarray):
        field_names(table)
        names = table.dtype.names
        return [{name: row[name].item() for name in names} for row in table]
    if hasattr(table, "to_dict") and hasattr(table, "columns"):
        return table.to_dict(orient="records")
    if isinstance(table, Mapping):
        columns = {k: list(v) for k, v in table.items()}
        lengths = {len(v) for v in columns.values()}
        if len(lengths) > 1:
            raise ValueError(f"Columns have different lengths: {sorted(lengths)}")
        n = lengths.pop() if lengths else 0
        return [{k: v[i] for k, v in columns.items()} for i in range(n)]
    if isinstance(table, (list, tuple)):
        field_names(table)
        return [dict(row) for row in table]
    raise TypeError(f"Unsupported data table: {type(table).__name__}")
