"""
AI service façade: one vocabulary over every vendor adapter.

An :class:`AIService` binds a resolved provider configuration to its protocol
adapter and a :class:`~omnihai_providers.base.http.Transport`. Every operation
comes in two forms:

- ``<op>_async(...)`` submits the work to the shared executor and returns a
  :class:`concurrent.futures.Future`;
- ``<op>(...)`` blocks on that future and re-raises the originating typed
  :class:`~omnihai_providers.base.errors.ProviderError` (executor wrappers are
  unwrapped, the original exception is kept as ``__cause__``).

Streaming is a pull: :meth:`AIService.chat_stream` returns a generator of
tokens. Payloads are built before the stream is opened, so capability errors
surface on the call itself, never mid-stream.

Example::

    service = AIService("openai")
    print(service.chat("Hello"))
    for token in service.chat_stream("Tell me a story"):
        print(token, end="")
"""
from __future__ import annotations

import logging
import re
import time
import uuid
from concurrent.futures import Future
from contextlib import closing
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, TypeVar, Union
from urllib.parse import urljoin

from ..base.adapter_parts import prompts
from ..base.adapters import ProtocolAdapter, check_supports_file_upload, is_blank
from ..base.errors import MalformedResponseError, ProviderError, unwrap_async_error
from ..base.factory import AdapterFactory
from ..base.http import HttpRequest, HttpxTransport, Transport
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.mime import extension_for, guess_mime_type, is_image
from ..base.moderation import (
    MODERATIONS_PATH,
    build_native_payload,
    moderation_chat_options,
    parse_moderation_chat_response,
    parse_native_response,
    supports_native_moderation,
)
from ..base.models import (
    Attachment,
    ChatInput,
    ChatOptions,
    GenerateImageOptions,
    ModerationOptions,
    ModerationResult,
    ServiceContext,
)
from ..base.streaming import TokenCallback, iter_sse_events, iter_stream_tokens
from ..config import ProviderConfig, resolve_provider_config
from .executor import submit

T = TypeVar("T")

ChatMessage = Union[str, ChatInput]
ImageSource = Union[bytes, Attachment]

_NON_LETTERS = re.compile(r"[^a-z]")


def _require_text(value: Optional[str], name: str) -> str:
    if is_blank(value):
        raise ValueError(f"{name} may not be blank")
    return value  # type: ignore[return-value]


def _require_positive(value: int, name: str) -> int:
    if value < 1:
        raise ValueError(f"{name} must be positive")
    return value


def _as_image(image: ImageSource) -> Attachment:
    if isinstance(image, Attachment):
        if not is_image(image.mime_type):
            raise ValueError(f"Not a supported image type: {image.mime_type}")
        return image
    content = bytes(image)
    mime_type = guess_mime_type(content[:1024])
    if not is_image(mime_type):
        raise ValueError("Image bytes are not a supported image type")
    return Attachment(mime_type=mime_type, file_name=f"image1.{extension_for(mime_type)}", content=content)


class AIService:
    """Chat, moderation, upload and image operations against one provider/model.

    Parameters:
        provider: Provider id (``"openai"``, ``"anthropic"``, ...).
        model: Model override; defaults to the configured model.
        api_key: Key override; defaults to ``<PROVIDER>_API_KEY``.
        base_url: Endpoint override.
        system_message: Default system prompt for calls without one.
        transport: Network collaborator; defaults to :class:`HttpxTransport`.
        adapter: Protocol adapter; defaults to the factory's adapter.
        capabilities: Capability flag overrides, e.g. ``{"streaming": False}``.

    Raises:
        ValueError: When a required setting (model, endpoint, API key) is missing.
        UnknownProviderError: When ``provider`` has no adapter.
    """

    def __init__(
        self,
        provider: str,
        *,
        model: Optional[str] = None,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        system_message: Optional[str] = None,
        transport: Optional[Transport] = None,
        adapter: Optional[ProtocolAdapter] = None,
        capabilities: Optional[Mapping[str, bool]] = None,
    ) -> None:
        overrides = {"model": model, "api_key": api_key, "base_url": base_url, "system_message": system_message}
        self._init(resolve_provider_config(provider, overrides), transport, adapter, capabilities)

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        *,
        transport: Optional[Transport] = None,
        adapter: Optional[ProtocolAdapter] = None,
        capabilities: Optional[Mapping[str, bool]] = None,
    ) -> "AIService":
        service = cls.__new__(cls)
        service._init(config, transport, adapter, capabilities)
        return service

    def _init(
        self,
        config: ProviderConfig,
        transport: Optional[Transport],
        adapter: Optional[ProtocolAdapter],
        capabilities: Optional[Mapping[str, bool]],
    ) -> None:
        self._config = config
        self._adapter = adapter or AdapterFactory.create(config.provider)
        flags = self._adapter.capabilities(config.model).with_overrides(**{**config.capabilities, **(capabilities or {})})
        self._base_url = config.base_url.rstrip("/") + "/"
        self._ctx = LogContext(provider=config.provider, model=config.model)
        self._transport = transport or HttpxTransport(base_url=self._base_url, ctx=self._ctx)
        self._logger = get_logger(f"providers.{config.provider}")
        self.context = ServiceContext(
            provider=config.provider,
            provider_name=config.name,
            model_name=config.model,
            capabilities=flags,
            upload=self._upload,
            api_key=config.api_key,
        )

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    @property
    def name(self) -> str:
        return self.context.name

    @property
    def provider(self) -> str:
        return self.context.provider

    @property
    def model(self) -> str:
        return self.context.model_name

    @property
    def capabilities(self):
        return self.context.capabilities

    @property
    def adapter(self) -> ProtocolAdapter:
        return self._adapter

    def __repr__(self) -> str:
        return f"AIService({self.name})"

    # ------------------------------------------------------------------
    # Chat
    # ------------------------------------------------------------------

    def chat(self, message: ChatMessage, options: Optional[ChatOptions] = None) -> str:
        return self._await(self.chat_async(message, options))

    def chat_async(self, message: ChatMessage, options: Optional[ChatOptions] = None) -> "Future[str]":
        return submit(self._chat, self._as_input(message), self._with_defaults(options))

    def chat_stream(self, message: ChatMessage, options: Optional[ChatOptions] = None) -> Iterator[str]:
        """Return a generator of streamed tokens.

        The payload is built (and capabilities checked) immediately; the HTTP
        stream is opened on the first pull and closed when the vendor's end
        marker arrives, an error is raised or the generator is closed.
        """
        chat_input = self._as_input(message)
        options = self._with_defaults(options)
        payload = self._adapter.build_chat_payload(self.context, chat_input, options, True)
        request = self._request(self._adapter.chat_path(self.context, True), payload)
        return self._stream_tokens(request, options)

    def chat_stream_async(
        self,
        message: ChatMessage,
        on_token: TokenCallback,
        options: Optional[ChatOptions] = None,
    ) -> "Future[str]":
        """Stream on a worker thread, pushing every token to ``on_token``; resolves to the full text."""
        stream = self.chat_stream(message, options)

        def _consume() -> str:
            parts = []
            with closing(stream) as tokens:
                for token in tokens:
                    on_token(token)
                    parts.append(token)
            return "".join(parts)

        return submit(_consume)

    def _chat(self, chat_input: ChatInput, options: ChatOptions) -> str:
        payload = self._adapter.build_chat_payload(self.context, chat_input, options, False)
        request = self._request(self._adapter.chat_path(self.context, False), payload)
        ctx = self._ctx.with_request(uuid.uuid4().hex, "chat")
        self._log_start(ctx, options, streaming=False)
        t0 = time.perf_counter()
        try:
            text = self._adapter.parse_chat_response(self._transport.send(request).body)
        except ProviderError as e:
            self._log_error(ctx, e)
            raise
        self._log_end(ctx, t0, emitted=True)
        return text

    def _stream_tokens(self, request: HttpRequest, options: ChatOptions) -> Iterator[str]:
        ctx = self._ctx.with_request(uuid.uuid4().hex, "chat_stream")
        self._log_start(ctx, options, streaming=True)
        t0 = time.perf_counter()
        emitted = 0

        def _process(event, on_token) -> bool:
            return self._adapter.process_chat_stream_event(self.context, event, on_token)

        try:
            events = iter_sse_events(self._transport.open_stream(request), ctx)
            with closing(iter_stream_tokens(events, _process)) as tokens:
                for token in tokens:
                    emitted += 1
                    yield token
        except ProviderError as e:
            self._log_error(ctx, e, emitted=emitted)
            raise
        self._log_end(ctx, t0, emitted=emitted > 0, tokens={"chunks": emitted})

    # ------------------------------------------------------------------
    # Moderation
    # ------------------------------------------------------------------

    def moderate_content(self, content: str, options: Optional[ModerationOptions] = None) -> ModerationResult:
        return self._await(self.moderate_content_async(content, options))

    def moderate_content_async(
        self, content: str, options: Optional[ModerationOptions] = None
    ) -> "Future[ModerationResult]":
        options = options or ModerationOptions.DEFAULT
        _require_text(content, "content")
        return submit(self._moderate, content, options)

    def _moderate(self, content: str, options: ModerationOptions) -> ModerationResult:
        if supports_native_moderation(self.context, options):
            body = self._transport.send(self._request(MODERATIONS_PATH, build_native_payload(content))).body
            return parse_native_response(body, options)
        response = self._chat(ChatInput.of(content), moderation_chat_options(options))
        return parse_moderation_chat_response(response, options)

    # ------------------------------------------------------------------
    # Files
    # ------------------------------------------------------------------

    def upload(self, attachment: Attachment) -> str:
        """Upload ``attachment`` to the vendor's files API and return its file id."""
        return self._await(self.upload_async(attachment))

    def upload_async(self, attachment: Attachment) -> "Future[str]":
        return submit(self._upload, attachment)

    def _upload(self, attachment: Attachment) -> str:
        # runs inline on the worker that builds a chat payload
        check_supports_file_upload(self.context)
        metadata = self._adapter.file_upload_metadata(self.context, attachment)
        request = self._request(self._adapter.files_path(self.context), None)
        result = self._transport.upload(request, attachment.with_metadata_map(metadata))
        return self._adapter.parse_file_response(result.body)

    # ------------------------------------------------------------------
    # Images
    # ------------------------------------------------------------------

    def generate_image(self, prompt: str, options: Optional[GenerateImageOptions] = None) -> bytes:
        return self._await(self.generate_image_async(prompt, options))

    def generate_image_async(self, prompt: str, options: Optional[GenerateImageOptions] = None) -> "Future[bytes]":
        return submit(self._generate_image, prompt, options or GenerateImageOptions.DEFAULT)

    def _generate_image(self, prompt: str, options: GenerateImageOptions) -> bytes:
        payload = self._adapter.build_image_payload(self.context, prompt, options)
        body = self._transport.send(self._request(self._adapter.image_path(self.context), payload)).body
        return self._adapter.parse_image_response(body)

    def analyze_image(self, image: ImageSource, prompt: Optional[str] = None) -> str:
        return self._await(self.analyze_image_async(image, prompt))

    def analyze_image_async(self, image: ImageSource, prompt: Optional[str] = None) -> "Future[str]":
        """Describe ``image``; with a blank ``prompt`` a detailed description is requested."""
        attachment = _as_image(image)
        if is_blank(prompt):
            message = prompts.DEFAULT_ANALYZE_IMAGE_MESSAGE
            options = ChatOptions.DETERMINISTIC.with_system_prompt(prompts.build_analyze_image_prompt())
        else:
            message = prompt  # type: ignore[assignment]
            options = ChatOptions.DETERMINISTIC
        return submit(self._chat, ChatInput(message=message, images=(attachment,)), options)

    def generate_alt_text(self, image: ImageSource) -> str:
        return self._await(self.generate_alt_text_async(image))

    def generate_alt_text_async(self, image: ImageSource) -> "Future[str]":
        return self.analyze_image_async(image, prompts.build_generate_alt_text_prompt())

    # ------------------------------------------------------------------
    # Text operations delegating to chat
    # ------------------------------------------------------------------

    def summarize(self, text: str, max_words: int) -> str:
        return self._await(self.summarize_async(text, max_words))

    def summarize_async(self, text: str, max_words: int) -> "Future[str]":
        options = ChatOptions(
            system_prompt=prompts.build_summarize_prompt(_require_positive(max_words, "max_words")),
            temperature=prompts.TEXT_ANALYSIS_TEMPERATURE,
        )
        return self._text_op(text, options)

    def extract_key_points(self, text: str, max_points: int) -> List[str]:
        return self._await(self.extract_key_points_async(text, max_points))

    def extract_key_points_async(self, text: str, max_points: int) -> "Future[List[str]]":
        options = ChatOptions(
            system_prompt=prompts.build_extract_key_points_prompt(_require_positive(max_points, "max_points")),
            temperature=prompts.TEXT_ANALYSIS_TEMPERATURE,
        )
        return self._text_op(text, options, lambda response: [
            line.strip() for line in response.split("\n") if line.strip()
        ])

    def detect_language(self, text: str) -> str:
        return self._await(self.detect_language_async(text))

    def detect_language_async(self, text: str) -> "Future[str]":
        options = ChatOptions.DETERMINISTIC.with_system_prompt(prompts.build_detect_language_prompt())

        def _language_code(response: str) -> str:
            code = _NON_LETTERS.sub("", response.strip().lower())
            if not code:
                raise MalformedResponseError("Response is empty", response)
            return code

        return self._text_op(text, options, _language_code)

    def translate(self, text: str, source_lang: Optional[str], target_lang: str) -> str:
        return self._await(self.translate_async(text, source_lang, target_lang))

    def translate_async(self, text: str, source_lang: Optional[str], target_lang: str) -> "Future[str]":
        _require_text(target_lang, "target_lang")
        options = ChatOptions.DETERMINISTIC.with_system_prompt(prompts.build_translate_prompt(source_lang, target_lang))
        return self._text_op(text, options)

    def proofread(self, text: str) -> str:
        return self._await(self.proofread_async(text))

    def proofread_async(self, text: str) -> "Future[str]":
        options = ChatOptions.DETERMINISTIC.with_system_prompt(prompts.build_proofread_prompt())
        return self._text_op(text, options)

    def _text_op(
        self,
        text: str,
        options: ChatOptions,
        convert: Optional[Callable[[str], Any]] = None,
    ) -> "Future[Any]":
        chat_input = ChatInput.of(_require_text(text, "text"))

        def _run() -> Any:
            response = self._chat(chat_input, options)
            return convert(response) if convert is not None else response

        return submit(_run)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _as_input(self, message: ChatMessage) -> ChatInput:
        return message if isinstance(message, ChatInput) else ChatInput.of(message)

    def _with_defaults(self, options: Optional[ChatOptions]) -> ChatOptions:
        options = options or ChatOptions.DEFAULT
        if options.system_prompt is None and not is_blank(self._config.system_message):
            return options.with_system_prompt(self._config.system_message)
        return options

    def _request(self, path: str, payload: Optional[Dict[str, Any]]) -> HttpRequest:
        headers = dict(self._config.headers)
        headers.update(self._adapter.request_headers(self.context))
        return HttpRequest("POST", urljoin(self._base_url, path), headers, payload)

    def _await(self, future: "Future[T]") -> T:
        try:
            return future.result()
        except (ProviderError, ValueError):
            raise
        except Exception as exc:
            raise unwrap_async_error(exc, provider=self.provider, model=self.model) from exc

    def _log_start(self, ctx: LogContext, options: ChatOptions, *, streaming: bool) -> None:
        normalized_log_event(
            self._logger,
            "chat.start",
            ctx,
            phase="start",
            structured=options.json_schema is not None,
            streaming=streaming,
            max_tokens=options.max_tokens,
            temperature=options.temperature,
        )

    def _log_end(self, ctx: LogContext, t0: float, *, emitted: bool, tokens: Any = None) -> None:
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            emitted=emitted,
            tokens=tokens,
            latency_ms=(time.perf_counter() - t0) * 1000.0,
        )

    def _log_error(self, ctx: LogContext, error: ProviderError, emitted: int = 0) -> None:
        normalized_log_event(
            self._logger,
            "chat.error",
            ctx,
            phase="mid_stream" if emitted else "finalize",
            error_code=error.code.value,
            emitted=emitted > 0,
            level=logging.ERROR,
            error=error.message,
        )


__all__ = ["AIService", "ChatMessage", "ImageSource"]
