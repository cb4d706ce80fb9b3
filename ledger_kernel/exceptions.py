"""
Typed exception hierarchy for the ledger kernel and reporting modules.

Every error carries a class-level ``code`` (machine-readable, API-safe)
and stores its context as attributes rather than inside the message, so
callers catch by type and read structured data:

    try:
        report = service.ledger_statement(ledger_id, start, end)
    except LedgerNotFoundError as e:
        return {"error": e.code, "ledger_id": e.ledger_id}

Hierarchy::

    LedgerKernelError (base)
    |
    +-- LedgerError
    |   +-- LedgerNotFoundError
    |
    +-- DatasetError
        +-- InvalidDatasetError

Error codes
-----------

Category  | Code              | When raised
----------|-------------------|-----------------------------------------
Ledger    | LEDGER_NOT_FOUND  | Statement requested for an unknown ledger
Dataset   | INVALID_DATASET   | A dataset file has a malformed record

Report imbalance (trial balance or balance sheet) is never an exception.
It is surfaced as the ``difference`` / ``is_balanced`` fields of the
report so that dirty data stays visible instead of aborting a statement.
Errors raised by the persistence layer (SQLAlchemy) propagate unchanged.
"""


class LedgerKernelError(Exception):
    """
    Base exception for all ledger kernel errors.

    All subclasses must have a ``code`` class attribute for
    machine-readable error identification.
    """

    code: str = "LEDGER_KERNEL_ERROR"


# Ledger-related exceptions


class LedgerError(LedgerKernelError):
    """Base exception for ledger-related errors."""

    code: str = "LEDGER_ERROR"


class LedgerNotFoundError(LedgerError):
    """Ledger with the given ID does not exist for the tenant."""

    code: str = "LEDGER_NOT_FOUND"

    def __init__(self, ledger_id: str):
        self.ledger_id = ledger_id
        super().__init__(f"Ledger not found: {ledger_id}")


# Dataset-related exceptions


class DatasetError(LedgerKernelError):
    """Base exception for dataset loading errors."""

    code: str = "DATASET_ERROR"


class InvalidDatasetError(DatasetError):
    """A record in a dataset file cannot be interpreted."""

    code: str = "INVALID_DATASET"

    def __init__(self, section: str, reason: str, record_ref: str | None = None):
        self.section = section
        self.reason = reason
        self.record_ref = record_ref
        where = f"{section}[{record_ref}]" if record_ref is not None else section
        super().__init__(f"Invalid dataset record in {where}: {reason}")
