"""
Unified OpenAI client and the completion provider used by the AI coach.

All modules that need OpenAI should import from here:
    from app.ai.openai_client import get_client, key_present, key_fingerprint

This ensures:
- The API key is read ONCE and stripped of whitespace.
- A single client instance is reused.
- Every OpenAI failure surfaces as UpstreamUnavailable.
"""
import openai

from app.core.config import COMPLETION_MAX_TOKENS, OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TIMEOUT
from app.core.errors import UpstreamUnavailable

_KEY: str = OPENAI_API_KEY.strip()

# Track last error for diagnostics
_last_error: str | None = None

# Lazily-created singleton
_client = None


def key_present() -> bool:
    return bool(_KEY)


def key_fingerprint() -> str:
    """Return masked key for safe logging: sk-xxxx...1234"""
    if not _KEY:
        return "(not set)"
    if len(_KEY) <= 10:
        return _KEY[:2] + "***"
    return _KEY[:6] + "..." + _KEY[-4:]


def get_client():
    """
    Return the shared OpenAI client, or None if the key is missing.
    """
    global _client
    if not _KEY:
        return None
    if _client is None:
        _client = openai.OpenAI(api_key=_KEY, timeout=OPENAI_TIMEOUT)
    return _client


def set_last_error(msg: str):
    global _last_error
    _last_error = msg


def get_last_error() -> str | None:
    return _last_error


def log_startup():
    """Print one-time startup diagnostics."""
    print(f"[AI] OPENAI_API_KEY present: {key_present()}", flush=True)
    print(f"[AI] key fingerprint: {key_fingerprint()}", flush=True)
    print(f"[AI] model: {OPENAI_MODEL}", flush=True)


class OpenAICompletionProvider:
    """generate(system_instructions, messages) -> reply text."""

    def __init__(self, client=None, model: str = OPENAI_MODEL, max_tokens: int = COMPLETION_MAX_TOKENS):
        self._client = client
        self.model = model
        self.max_tokens = max_tokens

    def generate(self, system_instructions: str, messages: list[dict]) -> str:
        client = self._client or get_client()
        if client is None:
            set_last_error("OPENAI_API_KEY not set")
            raise UpstreamUnavailable("AI coach is not configured")

        try:
            response = client.chat.completions.create(
                model=self.model,
                messages=[{"role": "system", "content": system_instructions}, *messages],
                max_tokens=self.max_tokens,
            )
        except openai.AuthenticationError as e:
            set_last_error(f"AuthenticationError: {e}")
            print(f"[AI] authentication failed (key {key_fingerprint()})", flush=True)
            raise UpstreamUnavailable() from e
        except openai.OpenAIError as e:
            set_last_error(f"{type(e).__name__}: {e}")
            print(f"[AI] completion failed: {type(e).__name__}", flush=True)
            raise UpstreamUnavailable() from e

        text = (response.choices[0].message.content or "").strip() if response.choices else ""
        if not text:
            set_last_error("empty completion")
            raise UpstreamUnavailable("AI coach returned an empty reply")
        return text
