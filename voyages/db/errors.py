from sqlalchemy.exc import IntegrityError

UNIQUE_VIOLATION = "unique"
FOREIGN_KEY_VIOLATION = "foreign_key"

# PostgreSQL SQLSTATE codes
_PG_CODES = {
    "23505": UNIQUE_VIOLATION,
    "23503": FOREIGN_KEY_VIOLATION,
}


def classify_integrity_error(exc: IntegrityError):
    """
    Work out which constraint an IntegrityError came from

    Args:
        exc: the error raised by flush/commit

    Returns:
        UNIQUE_VIOLATION, FOREIGN_KEY_VIOLATION or None when unknown
    """
    orig = exc.orig
    pgcode = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if pgcode in _PG_CODES:
        return _PG_CODES[pgcode]

    message = str(orig).upper()
    if "UNIQUE" in message or "DUPLICATE KEY" in message:
        return UNIQUE_VIOLATION
    if "FOREIGN KEY" in message:
        return FOREIGN_KEY_VIOLATION
    return None
