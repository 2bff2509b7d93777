"""Exceptions raised by model providers."""


class ProviderError(Exception):
    """Base exception for provider failures."""

    def __init__(self, provider: str, message: str):
        super().__init__(f"{provider}: {message}")
        self.provider = provider


class ProviderConfigurationError(ProviderError):
    """Raised when a provider is missing its API key or other settings."""


class ProviderRateLimitError(ProviderError):
    """Raised when a provider rejects a request because of rate limiting."""

    def __init__(self, provider: str, message: str = "API rate limit exceeded", retry_after: int = 60):
        super().__init__(provider, message)
        self.retry_after = retry_after
