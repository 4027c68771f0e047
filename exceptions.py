"""
Error types raised by the metadata analyzer
"""


class MetaTagError(Exception):
    """Base class for all analyzer errors"""


class InvalidUrlError(MetaTagError):
    """The submitted URL is not a well-formed http(s) URL"""


class InvalidInputError(MetaTagError):
    """Required tag-generation fields are missing or empty"""


class RenderError(MetaTagError):
    """The headless browser could not load or evaluate the page"""


class StaticFetchError(MetaTagError):
    """The plain HTTP fetch of the page failed"""


class AnalysisError(MetaTagError):
    """Both extraction strategies failed for a URL"""


class SuggestionEngineError(MetaTagError):
    """The remote generative model could not be reached or refused the request"""
