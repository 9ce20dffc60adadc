"""
Infrastructure initialization and bootstrap.

Singleton pattern for creating the clients and the orchestrator from
configuration.
"""

from typing import Optional

from completion import CompletionOrchestrator
from documents import DocumentClient
from transport.slack.sender import NotifyClient

from .config import AppConfig, get_config


class AppBootstrap:
    """
    Wire configuration, clients, and orchestrator together.

    Singleton pattern - single instance per process.
    """

    _instance: Optional["AppBootstrap"] = None

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        document_client: Optional[DocumentClient] = None,
        notify_client: Optional[NotifyClient] = None,
    ):
        """Initialize bootstrap with configuration; clients may be injected."""
        self.config = config or get_config()
        self.document_client = document_client or self.config.create_document_client()
        self.notify_client = notify_client or self.config.create_notify_client()
        self.orchestrator = CompletionOrchestrator(
            document_client=self.document_client,
            notify_client=self.notify_client,
            options=self.config.completion_options(),
        )

    @classmethod
    def get_instance(cls, config: Optional[AppConfig] = None) -> "AppBootstrap":
        """
        Get singleton instance.

        Args:
            config: Optional custom configuration (only used first time)

        Returns:
            Singleton AppBootstrap instance
        """
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def reset(cls):
        """Reset singleton (for testing)."""
        cls._instance = None

    def __repr__(self) -> str:
        return (
            f"AppBootstrap(documents={self.config.document_backend}, "
            f"environment={self.config.environment})"
        )


def get_bootstrap() -> AppBootstrap:
    """Get the process-wide AppBootstrap."""
    return AppBootstrap.get_instance()
