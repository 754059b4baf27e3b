"""
Abstract base classes defining the core contracts for ListSmith.

The text generator, product sources and research strategies implement
these interfaces so services can be assembled with real or fake
collaborators interchangeably.
"""

from abc import ABC, abstractmethod

from listsmith.core.models import ProductResearchData, ProductSourceData


class ITextGenerator(ABC):
    """Interface for an LLM text-completion provider."""

    model: str = ""

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        system_prompt: str = "",
        max_tokens: int = 1000,
        temperature: float = 0.7,
    ) -> str:
        """
        Complete a prompt.

        Args:
            prompt: The user message.
            system_prompt: Optional system message sent before the prompt.
            max_tokens: Upper bound on the reply length.
            temperature: Sampling temperature.

        Returns:
            The reply text.

        Raises:
            TextGenerationError: If the provider fails or replies with nothing.
            CircuitBreakerOpenError: If the provider is temporarily bypassed.
        """
        ...


class IProductSource(ABC):
    """Interface for anything that can report findings about a product."""

    name: str = ""

    @abstractmethod
    async def fetch(self, title: str) -> ProductSourceData | None:
        """
        Look a product up by title.

        Args:
            title: The product title as entered by the seller.

        Returns:
            ProductSourceData, or None when the source has nothing to offer.
        """
        ...


class IResearchStrategy(ABC):
    """Interface for one step of the research fallback chain."""

    name: str = ""

    @abstractmethod
    async def research(self, title: str) -> ProductResearchData:
        """
        Produce a research record for a product title.

        Raises:
            ResearchUnavailableError: If this strategy cannot produce a record.
        """
        ...
