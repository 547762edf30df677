"""Application state controller for the Image Studio client."""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from ..config.settings import Settings, get_settings
from ..domain.entities.generation import (
    DEFAULT_ASPECT_RATIO,
    GenerationRequest,
    GenerationResult,
    validate_aspect_ratio,
    validate_number_of_images,
)
from ..domain.entities.history_entry import HistoryEntry
from ..domain.entities.style_preset import apply_style, get_style_preset
from ..domain.errors import ValidationError, is_rate_limit_failure
from .countdown import Countdown
from .downloads import save_data_url
from .history_store import HistoryStore
from .relay_client import RelayClient

logger = logging.getLogger(__name__)

TAB_CONFIGURE = "configure"
TAB_HISTORY = "history"
TABS = (TAB_CONFIGURE, TAB_HISTORY)

EMPTY_PROMPT_MESSAGE = "Please enter a prompt."
UNKNOWN_ERROR_MESSAGE = "An unknown error occurred."


@dataclass
class StudioState:
    """Everything the presentation layer renders."""

    prompt: str = ""
    aspect_ratio: str = DEFAULT_ASPECT_RATIO
    number_of_images: int = 1
    image_urls: list[str] | None = None
    error: str = ""
    is_loading: bool = False
    is_enhancing: bool = False
    is_generating_idea: bool = False
    is_rate_limited: bool = False
    countdown_seconds: int = 0
    active_tab: str = TAB_CONFIGURE
    selected_image_url: str | None = None


class StudioController:
    """
    Owns the client state and the transitions between states.

    The three network actions (generate, enhance, surprise_me) each toggle
    their own busy flag and do not block one another; whichever finishes
    last decides the displayed state. ``is_busy`` lets the presentation
    disable inputs while anything is in flight or rate limited.
    """

    def __init__(
        self,
        client: RelayClient,
        history: HistoryStore,
        settings: Settings | None = None,
        countdown: Countdown | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._client = client
        self._history = history
        self._countdown = countdown or Countdown()
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._cooldown_seconds = settings.rate_limit_cooldown_seconds
        self._image_mime_type = settings.image_output_mime_type
        self.state = StudioState()

        self._history.load()

    @property
    def history(self) -> list[HistoryEntry]:
        """Past generations, newest first."""
        return self._history.entries

    @property
    def is_busy(self) -> bool:
        """True while any action is in flight or the rate limit is active."""
        state = self.state
        return state.is_loading or state.is_enhancing or state.is_generating_idea or state.is_rate_limited

    # --- Form inputs ---

    def set_prompt(self, prompt: str) -> None:
        self.state.prompt = prompt

    def set_aspect_ratio(self, aspect_ratio: str) -> None:
        self.state.aspect_ratio = validate_aspect_ratio(aspect_ratio)

    def set_number_of_images(self, number_of_images: int) -> None:
        self.state.number_of_images = validate_number_of_images(number_of_images)

    def set_active_tab(self, tab: str) -> None:
        if tab not in TABS:
            raise ValidationError(f"tab must be one of: {', '.join(TABS)}")
        self.state.active_tab = tab

    # --- Network actions ---

    async def generate(self) -> list[str] | None:
        """
        Generate images for the current prompt and settings.

        Returns:
            The displayed image URLs, or None if nothing was generated
        """
        if not self.state.prompt.strip():
            self.state.error = EMPTY_PROMPT_MESSAGE
            return None

        try:
            request = GenerationRequest(
                prompt=self.state.prompt,
                aspect_ratio=self.state.aspect_ratio,
                number_of_images=self.state.number_of_images,
            )
        except ValidationError as e:
            self.state.error = e.message
            return None

        self.state.is_loading = True
        self.state.error = ""
        self.state.image_urls = None
        try:
            images = await self._client.generate_images(
                request.prompt,
                request.aspect_ratio,
                request.number_of_images,
            )
            result = GenerationResult(images=images, mime_type=self._image_mime_type, produced_at=self._clock())
            urls = result.image_urls
            self.state.image_urls = urls
            self._history.add(HistoryEntry.create(request, urls, result.produced_at))
            logger.info(f"Generated {len(urls)} image(s)")
            return urls
        except Exception as e:
            self._handle_failure(e)
            return None
        finally:
            self.state.is_loading = False

    async def enhance(self) -> None:
        """Replace the prompt with a more descriptive version. No-op when empty."""
        if not self.state.prompt.strip():
            return

        self.state.is_enhancing = True
        self.state.error = ""
        try:
            self.state.prompt = await self._client.enhance_prompt(self.state.prompt)
        except Exception as e:
            self._handle_failure(e)
        finally:
            self.state.is_enhancing = False

    async def surprise_me(self) -> None:
        """Replace the prompt with a random idea."""
        self.state.is_generating_idea = True
        self.state.error = ""
        try:
            self.state.prompt = await self._client.random_prompt()
        except Exception as e:
            self._handle_failure(e)
        finally:
            self.state.is_generating_idea = False

    # --- Local actions ---

    def apply_style(self, keywords: str) -> None:
        """Append style keywords to the prompt."""
        self.state.prompt = apply_style(self.state.prompt, keywords)

    def apply_style_preset(self, name: str) -> None:
        """
        Append a named preset's keywords to the prompt.

        Raises:
            KeyError: If no preset has that name
        """
        self.apply_style(get_style_preset(name).keywords)

    def reuse_history(self, entry: HistoryEntry | str) -> None:
        """
        Load a past entry's settings into the form.

        Does not generate and does not add a history entry.

        Raises:
            KeyError: If entry is an id that is not in the history
        """
        if isinstance(entry, str):
            found = self._history.get(entry)
            if found is None:
                raise KeyError(f"History entry '{entry}' not found")
            entry = found

        self.state.prompt = entry.prompt
        self.state.aspect_ratio = entry.aspect_ratio
        self.state.number_of_images = entry.number_of_images
        self.state.active_tab = TAB_CONFIGURE

    def select_image(self, url: str) -> None:
        """Open an image in the enlarged view."""
        self.state.selected_image_url = url

    def close_image(self) -> None:
        self.state.selected_image_url = None

    def save_image(self, url: str, directory: Path | str) -> Path:
        """Write a displayed image to disk and return its path."""
        timestamp_millis = int(self._clock().timestamp() * 1000)
        return save_data_url(url, Path(directory), timestamp_millis)

    async def close(self) -> None:
        """Tear down: stop the rate limit countdown and close the relay client."""
        self._countdown.cancel()
        await self._client.aclose()

    # --- Failure handling ---

    def _handle_failure(self, error: Exception) -> None:
        logger.error(f"Action failed: {error}")
        self.state.error = str(error) or UNKNOWN_ERROR_MESSAGE
        if is_rate_limit_failure(error):
            self._start_rate_limit_countdown()

    def _start_rate_limit_countdown(self) -> None:
        self.state.is_rate_limited = True
        self.state.countdown_seconds = self._cooldown_seconds
        self._countdown.start(
            self._cooldown_seconds,
            on_tick=self._on_countdown_tick,
            on_finish=self._on_countdown_finished,
        )

    def _on_countdown_tick(self, remaining: int) -> None:
        self.state.countdown_seconds = remaining

    def _on_countdown_finished(self) -> None:
        self.state.countdown_seconds = 0
        self.state.is_rate_limited = False
        logger.info("Rate limit countdown finished")
