"""
Error taxonomy for the analysis pipeline

Every error carries a message meant for direct display in the frontend.
"""


class DocumentAnalysisError(Exception):
    """Base class for failures surfaced to the caller"""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(DocumentAnalysisError):
    """Malformed or empty request body"""

    status_code = 400


class ExtractionError(DocumentAnalysisError):
    """Office-document text extraction failed; aborts the whole batch"""


class GenerationError(DocumentAnalysisError):
    """The model returned nothing usable"""


class ParseError(DocumentAnalysisError):
    """Structured output could not be parsed or validated"""
