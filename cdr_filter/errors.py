"""Fatal errors that abort a whole run before any output is produced."""


class CDRFormatError(ValueError):
    """The input cannot be processed as a CDR export of the chosen operator."""


class HeaderNotFoundError(CDRFormatError):
    def __init__(self, message: str = "no header"):
        super().__init__(message)


class IdentifierNotFoundError(CDRFormatError):
    def __init__(self, message: str = "CDR not found"):
        super().__init__(message)


class MissingColumnError(CDRFormatError):
    """A structurally mandatory column (first/last cell id) is absent."""
