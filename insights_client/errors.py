"""Errors raised by the Insights client."""

from __future__ import annotations


class InsightsError(Exception):
    """Base exception for all Insights client errors.

    Failures raised by caller-supplied entity, relationship, or stream item
    sources are never wrapped in this hierarchy.
    """


class InsightsAPIError(InsightsError):
    """Raised when the Insights server rejects or never answers a request.

    Attributes
    ----------
    status_code
        HTTP status code from the response, if a response was received.

    """

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        """Initialise with a message and optional HTTP status code."""
        self.status_code = status_code
        super().__init__(message)

    @classmethod
    def http_error(cls, status_code: int) -> InsightsAPIError:
        """Return an error for non-2xx HTTP responses."""
        return cls(f"Insights API HTTP {status_code}", status_code=status_code)

    @classmethod
    def timeout(cls) -> InsightsAPIError:
        """Return an error for request timeouts."""
        return cls("Insights API request timed out")

    @classmethod
    def network_error(cls, detail: str) -> InsightsAPIError:
        """Return an error for DNS, connection, or TLS failures."""
        return cls(f"Insights API network error: {detail}")


class InsightsConfigError(InsightsError):
    """Raised when client configuration is missing or invalid."""

    @classmethod
    def missing_env(cls, name: str) -> InsightsConfigError:
        """Return an error when a required environment variable is unset."""
        return cls(f"{name} environment variable is required")

    @classmethod
    def invalid_source_id(cls, value: str) -> InsightsConfigError:
        """Return an error when the source id is not an integer."""
        return cls(f"Invalid source id '{value}'. Must be an integer")


class GraphConsumedError(InsightsError):
    """Raised when a single-use graph is serialised a second time."""

    @classmethod
    def already_consumed(cls) -> GraphConsumedError:
        """Return an error for a repeated graph consumption attempt."""
        return cls("Graph sources have already been consumed")
