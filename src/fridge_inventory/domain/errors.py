"""Errors raised by the deduction engine and its persistence adapters."""


class QuantityParseError(ValueError):
    """A stored inventory quantity could not be read as a number."""


class InventoryReadError(RuntimeError):
    """The user's inventory could not be loaded."""


class InventoryWriteError(RuntimeError):
    """Updating or deleting an inventory item failed."""


class UsageLogError(RuntimeError):
    """Appending a usage log entry failed."""


class PreferenceStoreError(RuntimeError):
    """The preference store could not be reached."""


class TransactionLogError(RuntimeError):
    """The meal transaction could not be persisted."""
