from typing import Optional


class ProviderError(Exception):
    """Base class for failures talking to an upstream geocoding service."""


class ProviderConfigError(ProviderError):
    """The selected provider is missing a key or URL template."""


class ProviderTransportError(ProviderError):
    def __init__(self, status_code: Optional[int], detail: str = "") -> None:
        self.status_code = status_code
        self.detail = detail
        if status_code is None:
            message = f"Request failed: {detail}" if detail else "Request failed"
        else:
            message = f"API request failed with status: {status_code}"
        super().__init__(message)


class ProviderUpstreamStatus(ProviderError):
    def __init__(self, code: str, detail: str = "") -> None:
        self.code = code
        self.detail = detail
        message = f"Provider returned status {code}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ProviderPayloadError(ProviderError):
    """The upstream body could not be decoded as the expected JSON payload."""
