"""
BioGloss Errors
Exception types raised by the annotation pipeline
"""


class BioGlossError(Exception):
    """Base class for all BioGloss errors"""


class ExtractionError(BioGlossError):
    """Raised when plain text cannot be extracted from a source document.

    Fatal to the current annotation run: no partial output is produced.
    """


class DefinitionLookupError(BioGlossError):
    """Raised when the remote dictionary service cannot be queried"""


class ResponseShapeError(DefinitionLookupError):
    """Raised when the dictionary service returns a body that is not valid JSON"""


class LookupTimeoutError(DefinitionLookupError):
    """Raised when the dictionary service does not answer within the lookup timeout.

    The word counts as absent for the rest of the run but is not cached.
    """
