from typing import Any, Optional


class FetchConnectionError(Exception):
    """Base exception for connection configuration and request building errors."""
    pass


class InvalidURLError(FetchConnectionError, ValueError):
    def __init__(self, url: Any, reason: str = "no host could be determined"):
        msg = f"Invalid URL '{url}': {reason}"
        super().__init__(msg)
        self.url = url
        self.reason = reason


class InvalidProxyConfigError(FetchConnectionError, ValueError):
    def __init__(self, value: Any, reason: str, cause: Optional[Exception] = None):
        msg = f"Invalid proxy configuration {type(value).__name__}: {reason}"
        super().__init__(msg)
        self.value = value
        self.reason = reason
        self.cause = cause


class InvalidParamsError(FetchConnectionError, ValueError):
    def __init__(self, key: str, reason: str):
        msg = f"Invalid query parameter '{key}': {reason}"
        super().__init__(msg)
        self.key = key
        self.reason = reason


class InvalidParamsEncoderError(FetchConnectionError, ValueError):
    def __init__(self, selector: Any, available: list):
        msg = f"Params encoder '{selector}' not found. Available: {available}"
        super().__init__(msg)
        self.selector = selector
        self.available = available


class MissingPipelineError(FetchConnectionError):
    pass
