class ChatCompletionError(Exception):
    """Raised when the chat completion provider does not return a successful response."""

    pass


class ProviderConfigurationError(Exception):
    """Raised when a provider is selected whose API key is not configured."""

    pass


class ModelNotFoundError(Exception):
    """Raised when the model catalog is empty and no fallback model can be chosen."""

    pass
