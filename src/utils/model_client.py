from typing import Any, Dict, List, Optional

import httpx
from openai import APIConnectionError, APIStatusError, AsyncOpenAI

from controllers.config import (
    PROVIDER_ZAI,
    Settings,
    logger,
)
from controllers.errors import MissingCredential, NoContent, UpstreamError


Conversation = List[Dict[str, str]]

CHAT_COMPLETIONS_SUFFIX = "/chat/completions"


def build_completion_url(base_url: str, completion_path: str) -> str:
    """Join base URL and completion path without repeating shared path segments.

    ``https://h/v1`` + ``/v1/chat/completions`` -> ``https://h/v1/chat/completions``
    """
    base = base_url.rstrip("/")
    path_segments = [s for s in completion_path.strip("/").split("/") if s]
    if not path_segments:
        return base

    base_path = httpx.URL(base).path
    base_segments = [s for s in base_path.strip("/").split("/") if s]

    # Longest tail of the base path that is also a head of the completion path
    overlap = 0
    for size in range(min(len(base_segments), len(path_segments)), 0, -1):
        if base_segments[-size:] == path_segments[:size]:
            overlap = size
            break

    remaining = path_segments[overlap:]
    if not remaining:
        return base
    return base + "/" + "/".join(remaining)


def _reply_text(payload: Any) -> Optional[str]:
    try:
        content = payload["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return None
    if not isinstance(content, str) or not content.strip():
        return None
    return content


class ModelClient:
    """Narrow interface over a chat-completion vendor."""

    def __init__(self, api_key: Optional[str], model: str, base_url: str):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url

    def _require_key(self) -> str:
        if not self.api_key:
            raise MissingCredential()
        return self.api_key

    async def complete(
        self, conversation: Conversation, options: Optional[Dict[str, Any]] = None
    ) -> str:
        raise NotImplementedError

    async def aclose(self) -> None:
        """Release pooled connections, if the client holds any."""


class OpenAIModelClient(ModelClient):
    """OpenAI chat completions through the official SDK."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        extra_headers: Optional[Dict[str, str]] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        super().__init__(api_key, model, self._normalize_base_url(base_url))
        self.extra_headers = extra_headers or {}
        # Built once and reused; the key check in complete() covers a missing key
        self.client = (
            AsyncOpenAI(
                api_key=api_key,
                base_url=self.base_url,
                max_retries=0,
                default_headers=self.extra_headers or None,
                http_client=http_client,
            )
            if api_key
            else None
        )

    @staticmethod
    def _normalize_base_url(base_url: str) -> str:
        # The SDK appends /chat/completions itself
        base = base_url.rstrip("/")
        if base.endswith(CHAT_COMPLETIONS_SUFFIX):
            base = base[: -len(CHAT_COMPLETIONS_SUFFIX)]
        return base

    async def complete(
        self, conversation: Conversation, options: Optional[Dict[str, Any]] = None
    ) -> str:
        self._require_key()
        params = {"model": self.model}
        params.update(options or {})

        logger.info(f"Calling {self.base_url} with model {params['model']}")
        try:
            response = await self.client.chat.completions.create(
                messages=conversation, **params
            )
        except APIStatusError as e:
            logger.error(f"Model endpoint returned {e.status_code}: {e.response.text}")
            raise UpstreamError(e.status_code, e.response.text)
        except APIConnectionError as e:
            logger.error(f"Model endpoint unreachable: {str(e)}")
            raise UpstreamError(None, str(e))

        content = response.choices[0].message.content if response.choices else None
        if not content or not content.strip():
            raise NoContent()
        return content

    async def aclose(self) -> None:
        if self.client is not None:
            await self.client.close()


class HttpModelClient(ModelClient):
    """Any OpenAI-compatible endpoint reached over plain HTTPS with a bearer token."""

    def __init__(
        self,
        api_key: Optional[str],
        model: str,
        base_url: str,
        completion_path: str,
        extra_headers: Optional[Dict[str, str]] = None,
        vendor_options: Optional[Dict[str, Any]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        super().__init__(api_key, model, base_url)
        self.url = build_completion_url(base_url, completion_path)
        self.extra_headers = extra_headers or {}
        self.vendor_options = vendor_options or {}
        self.transport = transport

    async def complete(
        self, conversation: Conversation, options: Optional[Dict[str, Any]] = None
    ) -> str:
        api_key = self._require_key()
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {api_key}",
        }
        headers.update(self.extra_headers)

        body: Dict[str, Any] = {"messages": conversation, "model": self.model}
        body.update(self.vendor_options)
        body.update(options or {})

        logger.info(f"Calling {self.url} with model {body['model']}")
        try:
            async with httpx.AsyncClient(transport=self.transport) as client:
                response = await client.post(self.url, headers=headers, json=body)
        except httpx.HTTPError as e:
            logger.error(f"Model endpoint unreachable: {str(e)}")
            raise UpstreamError(None, str(e))

        if not response.is_success:
            logger.error(f"Model endpoint returned {response.status_code}: {response.text}")
            raise UpstreamError(response.status_code, response.text)

        try:
            payload = response.json()
        except ValueError:
            raise NoContent("Model endpoint returned a non-JSON body")

        content = _reply_text(payload)
        if content is None:
            raise NoContent()
        return content


def create_model_client(settings: Settings) -> ModelClient:
    """Pick the client implementation for the configured vendor."""
    if settings.model_provider == PROVIDER_ZAI:
        return HttpModelClient(
            api_key=settings.api_key,
            model=settings.resolved_model_name,
            base_url=settings.resolved_base_url,
            completion_path=settings.completion_path,
            extra_headers=settings.extra_headers,
            vendor_options={"thinking": {"type": "disabled"}},
        )
    return OpenAIModelClient(
        api_key=settings.api_key,
        model=settings.resolved_model_name,
        base_url=settings.resolved_base_url,
        extra_headers=settings.extra_headers,
    )
