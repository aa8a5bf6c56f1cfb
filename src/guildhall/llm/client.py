"""Ollama LLM client wrapper with bounded retries and a per-request timeout."""

import logging

import ollama

logger = logging.getLogger(__name__)


class OllamaClient:
    """Client wrapper for Ollama text generation.

    Every request is bounded by ``timeout`` seconds and retried at most
    ``max_retries`` times, so the worst-case latency of one call is
    ``timeout * max_retries``. Errors are re-raised after the last attempt;
    callers that must never fail (the decision oracle) catch them.

    Example:
        >>> client = OllamaClient(model_name="mistral:7b", timeout=8)
        >>> text = client.generate("Describe a misty forest in one sentence.")
    """

    DEFAULT_MODEL = "mistral:7b"
    DEFAULT_BASE_URL = "http://localhost:11434"
    DEFAULT_TIMEOUT = 8.0
    MAX_RETRIES = 1

    def __init__(
        self,
        model_name: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
    ):
        """Initialize the Ollama client.

        Args:
            model_name: The model to use. Defaults to mistral:7b.
            base_url: Ollama server URL. Defaults to http://localhost:11434.
            timeout: Request timeout in seconds. Defaults to 8.
            max_retries: Attempts per call. Defaults to 1 (no retry).
        """
        self.model_name = model_name or self.DEFAULT_MODEL
        self.base_url = base_url or self.DEFAULT_BASE_URL
        self.timeout = timeout or self.DEFAULT_TIMEOUT
        self.max_retries = max_retries or self.MAX_RETRIES

        self._client = ollama.Client(host=self.base_url, timeout=self.timeout)

        logger.debug(
            "Initialized OllamaClient with model=%s, base_url=%s, timeout=%s",
            self.model_name,
            self.base_url,
            self.timeout,
        )

    def health_check(self) -> bool:
        """Check if the Ollama server is reachable and the model is pulled."""
        try:
            models = self._client.list()
            model_names = [m.model for m in models["models"]]

            model_base = self.model_name.split(":")[0]
            is_available = any(
                self.model_name == name or name.startswith(model_base)
                for name in model_names
            )

            if not is_available:
                logger.warning(
                    "Model %s not found. Available models: %s",
                    self.model_name,
                    model_names,
                )
            return is_available

        except Exception as e:
            logger.error("Health check failed: %s", e)
            return False

    def generate(
        self,
        prompt: str,
        system: str | None = None,
        json_mode: bool = False,
    ) -> str:
        """Generate a response from the LLM.

        Args:
            prompt: The user prompt to send.
            system: Optional system prompt for context.
            json_mode: Ask the server to constrain output to JSON. The reply
                is still returned as raw text; parsing is the caller's job.

        Returns:
            The generated text.

        Raises:
            ollama.ResponseError: If the server rejects the request on the last attempt.
            ConnectionError / httpx.HTTPError: If the server is unreachable or times out.
        """
        logger.debug(
            "generate() called - prompt_len=%d, system=%s, json=%s",
            len(prompt),
            "yes" if system else "no",
            json_mode,
        )

        messages = []
        if system:
            messages.append({"role": "system", "content": system})
        messages.append({"role": "user", "content": prompt})

        for attempt in range(1, self.max_retries + 1):
            try:
                response = self._client.chat(
                    model=self.model_name,
                    messages=messages,
                    format="json" if json_mode else None,
                )
                content = response["message"]["content"]
                logger.debug("Response received - length=%d", len(content))
                return content

            except ollama.ResponseError as e:
                logger.warning("Attempt %d/%d failed with ResponseError: %s", attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    raise

            except Exception as e:
                logger.warning("Attempt %d/%d failed with error: %s", attempt, self.max_retries, e)
                if attempt == self.max_retries:
                    raise

        raise RuntimeError("Generation failed after all retries")
