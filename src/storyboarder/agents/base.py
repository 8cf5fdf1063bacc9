"""Base agent abstraction."""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Generic, TypeVar, Optional

from ..config import config
from ..errors import RemoteCallError, StoryboarderError
from ..services.anthropic import AnthropicClient
from ..services.imagen import ImagenClient

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

SYSTEM_PROMPT = """You are a creative director who writes short ad movies and the storyboards that illustrate them.

Output valid JSON only, following the structure requested by the user.
Do not add commentary before or after the JSON."""


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for storyboard agents.

    Provides shared functionality for agents that ask Claude for JSON and
    then render images for the parsed items. Subclasses implement
    `_execute`; `run` labels any `StoryboarderError` with the agent's stage.
    """

    def __init__(
        self,
        client: Optional[AnthropicClient] = None,
        imagen: Optional[ImagenClient] = None,
        model: Optional[str] = None,
        max_concurrency: Optional[int] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            client: AnthropicClient instance. Created if not provided.
            imagen: ImagenClient instance. Created if not provided.
            model: Model to use. Defaults to config.text_model.
            max_concurrency: Cap on concurrent image requests.
        """
        self._model = model or config.text_model
        self._client = client or AnthropicClient(model=self._model)
        self._imagen = imagen or ImagenClient()
        self._max_concurrency = max_concurrency or config.max_concurrency
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    @abstractmethod
    def stage(self) -> str:
        """Prefix for errors raised by this agent."""
        ...

    @property
    def system_prompt(self) -> str:
        """Return the system prompt for this agent."""
        return SYSTEM_PROMPT

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    async def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task.

        Raises:
            StoryboarderError: With `stage` set to this agent's stage.
        """
        try:
            return await self._execute(input_data)
        except StoryboarderError as e:
            if not e.stage:
                e.stage = self.stage
            self._logger.error(f"{e}")
            raise

    @abstractmethod
    async def _execute(self, input_data: InputT) -> OutputT:
        ...

    async def _create_message(
        self,
        prompt: str,
        max_tokens: int = 8192,
        temperature: float = 1.0,
    ) -> str:
        """Create a message using the agent's client and system prompt.

        Extended thinking is always off.

        Raises:
            RemoteCallError: If the client call fails.
        """
        self._logger.debug(f"Creating message with prompt length: {len(prompt)}")

        try:
            response = await asyncio.to_thread(
                self._client.create_message,
                prompt=prompt,
                max_tokens=max_tokens,
                system=self.system_prompt,
                temperature=temperature,
                extended_thinking=False,
            )
        except StoryboarderError:
            raise
        except Exception as e:
            raise RemoteCallError(f"Text generation failed: {e}") from e

        self._logger.debug(f"Received response of length: {len(response or '')}")
        self._logger.debug(f"Raw response: {response}")
        return response
