from ..core.config import settings
from .client import chat_completion


async def request_verdict(prompt: str) -> str:
    """Ask the independent safety model; returns its raw text, parsing is the caller's job."""
    messages = [{"role": "user", "content": prompt}]
    return await chat_completion(
        messages,
        base_url=settings.GEMINI_BASE_URL,
        api_key=settings.GEMINI_API_KEY,
        model=settings.GEMINI_MODEL,
        temperature=0.0,
    )
