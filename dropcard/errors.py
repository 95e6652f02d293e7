class ConstructionError(ValueError):
    """Raised when a game cannot be built (empty/malformed deck, bad parameters)."""
