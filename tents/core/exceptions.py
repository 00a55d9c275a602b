"""Custom exception hierarchy for the tents solver."""


class TentsError(Exception):
    """Base exception for solver failures."""


class PuzzleDefinitionError(TentsError):
    """Raised when a puzzle cannot be turned into a board."""


class PuzzleFileError(PuzzleDefinitionError):
    """Raised when a puzzle file cannot be parsed."""


class PlacementError(TentsError):
    """Raised when a cell update would break the board bookkeeping."""


class BoardStateError(TentsError):
    """Raised when two boards cannot be combined or an oracle is missing."""


class PartitionError(TentsError):
    """Raised when dependency regions overlap or touch."""


class ValidationError(TentsError):
    """Raised when a board integrity check fails."""
