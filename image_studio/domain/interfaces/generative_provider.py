"""Abstract interface for the external generative-AI provider."""

from abc import ABC, abstractmethod


class GenerativeProvider(ABC):
    """
    Abstract interface for image and text generation.

    This interface defines the contract for the provider the relay
    forwards to, allowing different implementations (e.g., Gemini,
    a test double) to be swapped without changing the relay.
    """

    @abstractmethod
    async def generate_images(
        self,
        prompt: str,
        aspect_ratio: str,
        number_of_images: int,
    ) -> list[str]:
        """
        Generate images from a text prompt.

        Args:
            prompt: Text description of the image to generate
            aspect_ratio: Aspect ratio (e.g., "1:1", "16:9")
            number_of_images: Number of images to generate (1-4)

        Returns:
            Base64-encoded images, in provider order

        Raises:
            ProviderError: If generation fails
        """
        pass

    @abstractmethod
    async def generate_text(self, instruction: str) -> str:
        """
        Generate text for an instruction.

        Args:
            instruction: Full instruction sent to the text model

        Returns:
            The model's text response, untouched

        Raises:
            ProviderError: If generation fails
        """
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """
        Check if the provider is reachable.

        Returns:
            True if service is available, False otherwise
        """
        pass


class ProviderError(Exception):
    """Exception raised when a provider call fails."""

    def __init__(
        self,
        message: str,
        original_error: Exception | None = None,
        rate_limited: bool = False,
    ):
        super().__init__(message)
        self.original_error = original_error
        self.rate_limited = rate_limited
