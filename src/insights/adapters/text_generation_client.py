"""Text-generation service client - Adapter for the remote language model."""

import abc
import logging
from typing import Optional

import requests

import config

logger = logging.getLogger(__name__)


class AbstractTextGenerationClient(abc.ABC):
    """Abstract base class for text-generation implementations."""

    @abc.abstractmethod
    def generate(self, instructions: str, content: str) -> str:
        """
        Generate freeform text.

        Args:
            instructions: Fixed instructional preamble (system instruction)
            content: The material to analyse

        Returns:
            The generated text

        Raises:
            TextGenerationError: If the request fails or returns no text
        """
        raise NotImplementedError


class GeminiTextGenerationClient(AbstractTextGenerationClient):
    """HTTP client for the Generative Language API generateContent method."""

    def __init__(self, api_key: Optional[str] = None, model: Optional[str] = None,
                 base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Initialize the client.

        Args:
            api_key: Service API key. If None, uses config.
            model: Model name. If None, uses config.
            base_url: API base URL. If None, uses config.
            timeout: Request timeout in seconds
        """
        settings = config.get_text_generation_config()
        self.api_key = api_key if api_key is not None else settings["api_key"]
        self.model = model or settings["model"]
        self.base_url = (base_url or settings["base_url"]).rstrip("/")
        self.timeout = timeout if timeout is not None else settings["timeout"]

    def generate(self, instructions: str, content: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "systemInstruction": {"parts": [{"text": instructions}]},
            "contents": [{"role": "user", "parts": [{"text": content}]}],
        }

        logger.info(f"Requesting text generation from model {self.model}")

        try:
            response = requests.post(
                url,
                json=payload,
                headers={"x-goog-api-key": self.api_key},
                timeout=self.timeout,
            )
            response.raise_for_status()
            body = response.json()

        except requests.exceptions.HTTPError as e:
            logger.error(f"HTTP error from text-generation service: {e}")
            raise TextGenerationError(f"Service returned an error: {e}") from e

        except requests.exceptions.RequestException as e:
            logger.error(f"Network error calling text-generation service: {e}")
            raise TextGenerationError(f"Network error: {e}") from e

        except ValueError as e:
            logger.error(f"Malformed response from text-generation service: {e}")
            raise TextGenerationError(f"Malformed response: {e}") from e

        text = extract_text(body)
        if not text:
            raise TextGenerationError("Service returned no text")

        logger.info(f"Received {len(text)} characters of generated text")
        return text


def extract_text(body) -> str:
    """Concatenate the text parts of the first candidate."""
    try:
        parts = body["candidates"][0]["content"]["parts"]
    except (KeyError, IndexError, TypeError):
        return ""
    return "".join(part.get("text", "") for part in parts if isinstance(part, dict)).strip()


class TextGenerationError(Exception):
    """Exception raised for errors in the text-generation client."""
    pass
