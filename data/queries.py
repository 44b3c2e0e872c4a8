"""
SQL queries as constants for better maintainability.

All queries are defined here to avoid SQL string literals scattered
throughout the codebase. This makes it easier to:
- Review SQL security
- Optimize queries
- Update schema changes

Field names used in {where} / {order_by} placeholders are validated by
SQLiteDatabase before formatting; values are always bound parameters.
"""

# ==================== Document Queries ====================

INSERT_DOCUMENT = """
    INSERT INTO documents (collection, id, data, created_at, updated_at)
    VALUES (?, ?, ?, ?, ?)
"""

UPDATE_DOCUMENT = """
    UPDATE documents
    SET data = ?, updated_at = ?
    WHERE collection = ? AND id = ?
"""

SELECT_DOCUMENT = """
    SELECT id, data, created_at, updated_at
    FROM documents
    WHERE collection = ? AND id = ?
"""

SELECT_DOCUMENTS = """
    SELECT id, data, created_at, updated_at
    FROM documents
    WHERE collection = ? {where}
    ORDER BY {order_by}
"""

DELETE_DOCUMENT = """
    DELETE FROM documents
    WHERE collection = ? AND id = ?
"""

COUNT_DOCUMENTS = """
    SELECT COUNT(*) FROM documents
    WHERE collection = ?
"""

# json_extract fragment for filters and ordering
JSON_FIELD = "json_extract(data, '$.{field}')"
