import httpx
from ..core.config import settings

async def chat_completion(
    messages,
    *,
    base_url: str,
    api_key: str,
    model: str,
    temperature: float = 0.0,
) -> str:
    """POST to an OpenAI-compatible /chat/completions endpoint and return the first choice's text.

    Transport errors, timeouts and non-2xx responses surface as ``httpx.HTTPError``;
    a payload without a text choice raises ``ValueError``.
    """
    url = f"{base_url.rstrip('/')}/chat/completions"
    headers = {"Authorization": f"Bearer {api_key}"}
    payload = {
        "model": model,
        "messages": messages,
        "temperature": temperature,
    }
    async with httpx.AsyncClient(timeout=settings.LLM_TIMEOUT_SECONDS) as client:
        r = await client.post(url, headers=headers, json=payload)
        r.raise_for_status()
        data = r.json()
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError) as exc:
        raise ValueError("completion payload has no message content") from exc
    if not isinstance(content, str):
        raise ValueError("completion content is not text")
    return content
