import asyncio
import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions
from google.generativeai.types import BlockedPromptException, StopCandidateException

from resume_analyzer.models.analysis import AnalysisPrompt, GenerationConfig, RawModelReply
from resume_analyzer.services.errors import MalformedResponse, QuotaExceeded, ServiceUnavailable

logger = logging.getLogger("uvicorn.error")

NO_RESPONSE = "No response received"


class AnalysisInvoker:
    """Sends one analysis prompt to Gemini and returns the raw reply text.

    Each call opens a fresh chat session with an empty history and drops it
    afterwards, so nothing carries over between requests.
    """

    def __init__(
        self,
        model,
        generation_config: GenerationConfig,
        timeout_seconds: Optional[float] = None,
    ):
        self._model = model
        self._generation_config = generation_config
        self._timeout_seconds = timeout_seconds

    @classmethod
    def from_settings(cls, settings) -> "AnalysisInvoker":
        if not settings.GEMINI_API_KEY:
            raise ValueError("GEMINI_API_KEY not set in environment variables.")
        genai.configure(api_key=settings.GEMINI_API_KEY)
        config = settings.generation_config()
        model = genai.GenerativeModel(settings.GEMINI_MODEL, generation_config=config.as_dict())
        return cls(model, config, timeout_seconds=settings.model_timeout)

    async def invoke(
        self,
        prompt: AnalysisPrompt,
        config: Optional[GenerationConfig] = None,
        timeout: Optional[float] = None,
    ) -> RawModelReply:
        """Run a single-turn exchange with the model.

        Raises:
            ServiceUnavailable: transport failure or the deadline expired.
            QuotaExceeded: the provider rejected the call for quota reasons.
        """
        config = config or self._generation_config
        timeout = timeout if timeout is not None else self._timeout_seconds

        chat_session = self._model.start_chat(history=[])
        try:
            response = await asyncio.wait_for(
                chat_session.send_message_async(prompt.text, generation_config=config.as_dict()),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Gemini call exceeded its {timeout}s deadline")
            raise ServiceUnavailable(f"Model call timed out after {timeout}s") from e
        except google_exceptions.ResourceExhausted as e:
            logger.error(f"Gemini quota exceeded: {e}")
            raise QuotaExceeded(f"Model quota exceeded: {e}") from e
        except (google_exceptions.GoogleAPIError, ConnectionError) as e:
            logger.exception("Error calling Gemini model")
            raise ServiceUnavailable(f"LLM generation failed: {e}") from e
        except (BlockedPromptException, StopCandidateException) as e:
            logger.warning(f"Gemini returned no usable candidate: {e!r}")
            return RawModelReply(text=NO_RESPONSE, malformed=True)

        try:
            text = self._reply_text(response)
        except MalformedResponse as e:
            logger.warning(f"{e}; falling back to '{NO_RESPONSE}'")
            return RawModelReply(text=NO_RESPONSE, malformed=True)

        logger.info("Received LLM response (first 200 chars): %s", text[:200].replace("\n", " "))
        return RawModelReply(text=text)

    @staticmethod
    def _reply_text(response) -> str:
        try:
            text = response.candidates[0].content.parts[0].text
        except (AttributeError, IndexError, TypeError) as e:
            raise MalformedResponse(f"Reply has no candidate text: {e}") from e
        if not text:
            raise MalformedResponse("Reply candidate text is empty")
        return text
