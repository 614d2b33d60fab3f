class OrderBotError(Exception):
    """Base class for failures of the external collaborators."""


class LedgerError(OrderBotError):
    """The spreadsheet ledger is unconfigured or a read/write against it failed."""


class TranscriptionError(OrderBotError):
    """Speech-to-text is unconfigured or the recognition call failed."""


class ContentFetchError(OrderBotError):
    """Audio content could not be downloaded from the messaging platform."""
