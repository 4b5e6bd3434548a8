"""
Vita - Error Taxonomy
======================
Every failure the chat loop can terminate on is one of these.

``ConfigurationError``
    Missing / invalid setting, or a vector table that does not exist.
``ProviderError``
    A remote call (embedding, vector search, chat completion) failed.
``InputStreamError``
    The line-reading source errored.
"""


class VitaError(Exception):
    """Base class for all Vita errors."""


class ConfigurationError(VitaError):
    """Raised when the process cannot be configured to run."""


class ProviderError(VitaError):
    """Raised when a hosted provider call fails (auth, quota, network, bad payload)."""

    def __init__(self, provider: str, message: str) -> None:
        self.provider = provider
        super().__init__(f"[{provider}] {message}")


class InputStreamError(VitaError):
    """Raised when reading user input fails for a reason other than EOF."""
