class InvalidReferenceError(LookupError):
    """L'assignment o la submission richiesta non esiste."""


class ConflictError(Exception):
    """La submission e' gia' stata consegnata."""
