"""Analysis orchestration: validate, prompt, call the model, normalize."""

import time

from loguru import logger

from ..config.settings import AnalyzerSettings
from ..core.exceptions import CredentialError
from ..core.llm_client import LLMClient
from .demo import generate_demo_result
from .models import AnalysisOptions, AnalysisOutcome
from .normalizer import normalize_response
from .prompts import build_messages
from .validation import validate_code

DEMO_NOTE = "Demo data: configure DEEPSEEK_API_KEY for real AI analysis"
DEMO_ENDPOINT_NOTE = "Demo data generated locally without calling the AI service"


class AnalysisEngine:
    """Runs one analysis per call; holds no per-request state.

    Uses the live LLM path when a usable API key is configured. Without one,
    :meth:`analyze` serves demo data (or raises ``CredentialError`` when demo
    fallback is disabled).
    """

    def __init__(
        self, settings: AnalyzerSettings, llm_client: LLMClient | None = None
    ) -> None:
        self.settings = settings
        if llm_client is None and settings.api_key_configured:
            llm_client = LLMClient(
                api_key=settings.api_key or "",
                model=settings.model,
                api_url=settings.api_url,
                max_tokens=settings.max_tokens,
                temperature=settings.temperature,
                max_retries=settings.max_retries,
            )
        self.llm_client = llm_client

    @property
    def live(self) -> bool:
        return self.llm_client is not None

    async def analyze(
        self,
        code: str,
        options: AnalysisOptions | None = None,
        file_name: str | None = None,
    ) -> AnalysisOutcome:
        """Analyze Java source with the configured model.

        Args:
            code: Java source text
            options: Requested check categories
            file_name: Optional file name included in the prompt

        Returns:
            AnalysisOutcome with a normalized result

        Raises:
            InputValidationError: If code is empty or too long
            CredentialError: If no key is configured and demo fallback is off,
                or the upstream rejected the key
            UpstreamError: If the upstream call failed after retries
        """
        code = validate_code(code)
        options = options or AnalysisOptions()

        if self.llm_client is None:
            if not self.settings.demo_fallback:
                raise CredentialError(
                    "Server configuration error: DEEPSEEK_API_KEY is not set",
                    status_code=503,
                )
            logger.info("No API key configured; serving demo analysis")
            return AnalysisOutcome(
                result=generate_demo_result(code, options),
                demo=True,
                note=DEMO_NOTE,
            )

        start_time = time.time()
        completion = await self.llm_client.chat_completion(
            build_messages(code, options, file_name)
        )
        result = normalize_response(completion.content, code)

        logger.info(
            f"Analysis finished in {time.time() - start_time:.2f}s: "
            f"{len(result.issues)} issue(s), {completion.attempts} attempt(s)"
        )

        return AnalysisOutcome(
            result=result,
            demo=False,
            model=completion.model,
            usage=completion.usage,
            attempts=completion.attempts,
        )

    def analyze_demo(
        self, code: str, options: AnalysisOptions | None = None
    ) -> AnalysisOutcome:
        """Demo analysis regardless of configuration.

        Raises:
            InputValidationError: If code is empty or too long
        """
        code = validate_code(code)
        return AnalysisOutcome(
            result=generate_demo_result(code, options),
            demo=True,
            note=DEMO_ENDPOINT_NOTE if self.live else DEMO_NOTE,
        )
