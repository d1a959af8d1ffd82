"""SQL text builders for the paginated row editor.

Values are rendered as SQL literals. Table names, column names and WHERE
clauses are inserted verbatim, so they must come from a trusted source.
"""
from typing import Any, Dict


def sql_literal(value: Any) -> str:
    if value is None:
        return "NULL"
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, str):
        return "'" + value.replace("'", "''") + "'"
    return str(value)


def select_page(table_name: str, page: int = 1, page_size: int = 50) -> str:
    if page < 1:
        raise ValueError("page must be >= 1")
    if page_size < 1:
        raise ValueError("page_size must be >= 1")
    offset = (page - 1) * page_size
    return f"SELECT * FROM {table_name} LIMIT {page_size} OFFSET {offset}"


def count_rows(table_name: str) -> str:
    return f"SELECT COUNT(*) as count FROM {table_name}"


def insert_row(table_name: str, data: Dict[str, Any]) -> str:
    if not data:
        raise ValueError("insert requires at least one column")
    columns = ", ".join(data.keys())
    values = ", ".join(sql_literal(v) for v in data.values())
    return f"INSERT INTO {table_name} ({columns}) VALUES ({values})"


def update_rows(table_name: str, data: Dict[str, Any], where: str) -> str:
    if not data:
        raise ValueError("update requires at least one column")
    sets = ", ".join(f"{key} = {sql_literal(value)}" for key, value in data.items())
    return f"UPDATE {table_name} SET {sets} WHERE {where}"


def delete_rows(table_name: str, where: str) -> str:
    return f"DELETE FROM {table_name} WHERE {where}"
