from typing import Any, List, Mapping

from .models import BackendResult, CanonicalQueryResult


def discover_columns(rows: List[Any]) -> List[str]:
    """Column names are the keys of the first row only.

    Rows are assumed homogeneous; keys that only appear in later rows are
    dropped by ``project_rows``.
    """
    if not rows:
        return []
    return list(rows[0].keys())


def project_rows(rows: List[Mapping[str, Any]], columns: List[str]) -> List[List[Any]]:
    return [[row.get(col) for col in columns] for row in rows]


def normalize(result: BackendResult) -> CanonicalQueryResult:
    """Converts a successful backend result into the canonical tabular shape.

    Args:
        result (BackendResult): A result with ``success=True``.

    Returns:
        CanonicalQueryResult: Columns, positionally aligned rows and meta.

    Raises:
        ValueError: If the result reports failure. Failures are never normalized.
    """
    if not result.success:
        raise ValueError("Cannot normalize a failed backend result")

    rows = result.results or []

    if result.columns is not None:
        return CanonicalQueryResult(
            columns=list(result.columns),
            rows=[list(row) for row in rows],
            meta=result.meta,
        )

    columns = discover_columns(rows)
    return CanonicalQueryResult(
        columns=columns,
        rows=project_rows(rows, columns),
        meta=result.meta,
    )
