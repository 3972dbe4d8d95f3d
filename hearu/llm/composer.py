from typing import Sequence

from ..core.config import settings
from .client import chat_completion


async def generate(instructions: str, transcript: Sequence[tuple[str, str]], user_text: str) -> str:
    # Full history goes to the model; trimming is the store's business.
    messages = [{"role": "system", "content": instructions}]
    messages.extend({"role": role, "content": content} for role, content in transcript)
    messages.append({"role": "user", "content": user_text})
    return await chat_completion(
        messages,
        base_url=settings.GROQ_BASE_URL,
        api_key=settings.GROQ_API_KEY,
        model=settings.GROQ_MODEL,
        temperature=0.0,
    )
