"""PearAI server provider client.

Purpose:
        Streams text completions (``POST /stream_complete``) and chat answers
        (``POST /server_chat``) from the PearAI server. Both endpoints answer
        with newline-delimited JSON which is decoded incrementally and handed
        to the caller one chunk at a time.

External dependencies:
        - ``httpx.AsyncClient`` (owned by the client, closed by ``aclose``).
        - Injected collaborators: ``HeaderProvider`` (identity headers),
          ``TokenSource`` (bearer token), ``UsageRecorder`` (usage accounting)
          and a token counter.

Usage accounting:
        The server may only be used with accounting consent. Both streaming
        calls check ``UsageRecorder.is_enabled()`` when they are *called*
        (before a generator is even returned) and raise
        ``UsageAccountingDisabled`` without any network traffic. A prompt
        token event is recorded before the request and a completion token
        event after the stream ends, whether it completed, failed or was
        closed early. The latter is best-effort: its failures are logged and
        never reach the caller.

Timeouts and retries:
        - Timeouts come from ``get_timeout_config()`` (``httpx.Timeout``).
        - Opening the request may be retried through a caller supplied
          ``RetryConfig``; the default is a single attempt. Nothing is retried
          after the first chunk was yielded.

Cancellation:
        Stop iterating and close the generator (``aclose()``, or
        ``contextlib.aclosing`` around ``async for``). The response is closed
        in the generator's ``finally`` block and the call ends in state
        ``cancelled``.
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from typing import Any, AsyncIterator, Dict, List, Mapping, Optional, Sequence

import httpx
from pydantic import ValidationError

from ..auth import HeaderProvider, IdentityHeaderProvider, TokenSource, TokenStore
from ..base.dto import CompletionArgsDTO
from ..base.errors import (
    ErrorCode,
    ProviderError,
    UsageAccountingDisabled,
    UsageRecordingError,
    classify_exception,
)
from ..base.http import create_async_client
from ..base.logging import LogContext, get_logger, normalized_log_event
from ..base.models import CompletionOptions, Message
from ..base.resilience import NO_RETRY, RetryConfig, retry
from ..base.streaming import MalformedLinePolicy, StreamState, stream_json
from ..base.timeouts import TimeoutConfig
from ..config import get_client_config
from ..config.defaults import (
    CHAT_PATH,
    COMPLETE_PATH,
    COMPLETION_TOKENS_EVENT,
    DEFAULT_MODEL,
    DEFAULT_MODELS,
    IMAGE_DETAIL,
    PROMPT_TOKENS_EVENT,
    PROVIDER_NAME,
    SERVER_URL,
    STOP_SEQUENCE_LIMIT,
    UNLIMITED_STOP_MODELS,
)
from ..telemetry import LocalUsageRecorder, SupportsTokenCount, TokenCounter, UsageRecorder
from .helpers import (
    build_headers,
    convert_args,
    convert_message,
    join_messages_text,
    open_stream,
    with_attempt_logging,
)


def _coerce_non_empty_str(candidate: Any, fallback: str) -> str:
    """Return ``candidate`` stripped, or ``fallback`` when missing or empty."""
    if candidate is None:
        return fallback
    coerced = str(candidate).strip()
    return coerced or fallback


class _CallTracker:
    """Per-call lifecycle bookkeeping: state, accumulator and finalize metrics."""

    def __init__(self) -> None:
        self.state = StreamState.IDLE
        self.previous_state: Optional[StreamState] = None
        self.parts: List[str] = []
        self.error: Optional[BaseException] = None
        self._t0 = time.perf_counter()
        self._first_chunk_ms: Optional[float] = None

    def transition(self, state: StreamState) -> None:
        """Move to ``state``; terminal states are final."""
        if self.state.terminal or self.state is state:
            return
        self.previous_state, self.state = self.state, state

    def interrupted(self, exc: BaseException) -> None:
        """Record a cancellation; only an active stream ends as cancelled."""
        if self.state is StreamState.STREAMING:
            self.transition(StreamState.CANCELLED)
        else:
            self.error = exc
            self.transition(StreamState.FAILED)

    def emitted(self, text: str) -> None:
        if self._first_chunk_ms is None:
            self._first_chunk_ms = (time.perf_counter() - self._t0) * 1000.0
        self.parts.append(text)

    @property
    def accumulated(self) -> str:
        return "".join(self.parts)

    def metrics(self) -> Dict[str, Any]:
        return {
            "time_to_first_token_ms": self._first_chunk_ms,
            "total_duration_ms": (time.perf_counter() - self._t0) * 1000.0,
            "emitted_count": len(self.parts),
        }


class PearAIServerClient:
    """Streaming completion/chat client for the PearAI server."""

    provider_name = PROVIDER_NAME

    def __init__(  # noqa: PLR0913
        self,
        server_url: Optional[str] = None,
        *,
        header_provider: Optional[HeaderProvider] = None,
        token_source: Optional[TokenSource] = None,
        usage_recorder: Optional[UsageRecorder] = None,
        token_counter: Optional[SupportsTokenCount] = None,
        retry_config: Optional[RetryConfig] = None,
        timeout_config: Optional[TimeoutConfig] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        complete_policy: MalformedLinePolicy = MalformedLinePolicy.TEXT,
        chat_policy: MalformedLinePolicy = MalformedLinePolicy.SKIP,
        config_overrides: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """Initialize the client from the layered configuration.

        Parameters
        ----------
        server_url:
            Server base URL; falls back to ``PEARAI_SERVER_URL``, the config
            file, then the built-in default.
        header_provider / token_source / usage_recorder / token_counter:
            Collaborators. Defaults are built from configuration: identity
            headers, a ``TokenStore`` seeded from ``PEARAI_ACCESS_TOKEN``, a
            ``LocalUsageRecorder`` enabled by ``PEARAI_TELEMETRY`` and a
            ``TokenCounter``.
        retry_config:
            Retry policy for opening requests (default: no retry).
        timeout_config / transport / http_client:
            HTTP plumbing. A supplied ``http_client`` is not closed by
            ``aclose``.
        complete_policy / chat_policy:
            Malformed line handling for each endpoint.
        config_overrides:
            Extra overrides passed to ``get_client_config``.
        """
        cfg = get_client_config(overrides={**(config_overrides or {}), "server_url": server_url})
        self._server_url = _coerce_non_empty_str(cfg.get("server_url"), SERVER_URL)
        self._models: List[str] = list(cfg.get("models") or DEFAULT_MODELS)
        self._default_model = _coerce_non_empty_str(cfg.get("default_model"), DEFAULT_MODEL)
        self._stop_limit = int(cfg.get("stop_limit", STOP_SEQUENCE_LIMIT))
        self._unlimited_stop_models = frozenset(cfg.get("unlimited_stop_models") or UNLIMITED_STOP_MODELS)
        self._image_detail = _coerce_non_empty_str(cfg.get("image_detail"), IMAGE_DETAIL)

        self._header_provider: HeaderProvider = (
            header_provider if header_provider is not None else IdentityHeaderProvider.from_config(cfg)
        )
        self._token_source: Optional[TokenSource] = (
            token_source if token_source is not None else TokenStore.from_config(cfg)
        )
        self._usage: UsageRecorder = (
            usage_recorder if usage_recorder is not None else LocalUsageRecorder(enabled=bool(cfg.get("telemetry")))
        )
        self._token_counter: SupportsTokenCount = token_counter if token_counter is not None else TokenCounter()
        self._retry_config = retry_config or NO_RETRY
        self._complete_policy = MalformedLinePolicy(complete_policy)
        self._chat_policy = MalformedLinePolicy(chat_policy)

        self._owns_http = http_client is None
        self._http = http_client or create_async_client(
            self._server_url,
            timeout_config=timeout_config,
            transport=transport,
        )
        self._logger = get_logger("pearai_providers.pearai")

    # ---- lifecycle ----
    async def __aenter__(self) -> "PearAIServerClient":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Close the owned HTTP client (idempotent)."""
        if self._owns_http and not self._http.is_closed:
            await self._http.aclose()

    @property
    def server_url(self) -> str:
        return self._server_url

    @property
    def usage_recorder(self) -> UsageRecorder:
        return self._usage

    def list_models(self) -> List[str]:
        """Return the supported model identifiers (static configuration)."""
        return list(self._models)

    # ---- request building ----
    def _resolve_options(self, options: Optional[CompletionOptions], overrides: Mapping[str, Any]) -> CompletionOptions:
        base = options or CompletionOptions(model=self._default_model)
        try:
            return base.merged(**overrides)
        except TypeError as e:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message=f"unknown completion option: {e}",
                provider=self.provider_name,
                model=base.model or None,
                raw=e,
            ) from e

    def build_args(self, options: CompletionOptions) -> CompletionArgsDTO:
        """Convert ``options`` into wire arguments (stop truncation applied).

        Raises:
            ProviderError: ``ErrorCode.VALIDATION`` for invalid options.
        """
        try:
            return convert_args(
                options,
                stop_limit=self._stop_limit,
                unlimited_stop_models=self._unlimited_stop_models,
            )
        except ValidationError as e:
            raise ProviderError(
                code=ErrorCode.VALIDATION,
                message=f"invalid completion options: {e}",
                provider=self.provider_name,
                model=options.model or None,
                raw=e,
            ) from e

    def _require_usage_accounting(self, model: str) -> None:
        if not self._usage.is_enabled():
            raise UsageAccountingDisabled(model=model)

    def _context(self, model: str, endpoint: str) -> LogContext:
        return LogContext(
            provider=self.provider_name,
            model=model,
            endpoint=endpoint,
            request_id=uuid.uuid4().hex[:12],
        )

    # ---- usage accounting ----
    def _count_tokens(self, text: str, model: str, *, is_prompt: bool) -> None:
        """Record a prompt or completion token event."""
        self._require_usage_accounting(model)
        event = PROMPT_TOKENS_EVENT if is_prompt else COMPLETION_TOKENS_EVENT
        self._usage.capture(event, {"tokens": self._token_counter.count(text), "model": model})

    def _record_completion_usage(self, text: str, model: str, ctx: LogContext) -> None:
        """Best-effort completion token event; failures are only logged."""
        try:
            self._count_tokens(text, model, is_prompt=False)
        except Exception as e:
            err = e if isinstance(e, ProviderError) else UsageRecordingError(str(e), model=model, raw=e)
            normalized_log_event(
                self._logger,
                "usage.record_error",
                ctx,
                phase="finalize",
                level=logging.WARNING,
                error=str(err),
                error_code=err.code.value,
            )

    # ---- auth ----
    async def _resolve_access_token(self, ctx: LogContext) -> Optional[str]:
        """Return a bearer token, or ``None`` when it cannot be resolved."""
        if self._token_source is None:
            return None
        try:
            tokens = await self._token_source.check_token_expired()
        except Exception as e:
            normalized_log_event(
                self._logger,
                "auth.resolve_error",
                ctx,
                phase="auth",
                level=logging.WARNING,
                error=str(e),
                error_code=classify_exception(e).value,
            )
            return None
        return tokens.access_token or None

    # ---- transport ----
    async def _open(self, path: str, headers: Mapping[str, str], body: Mapping[str, Any], ctx: LogContext) -> httpx.Response:
        cfg = with_attempt_logging(self._retry_config, self._logger, ctx, phase="stream.start")
        return await retry(cfg)(open_stream)(self._http, path, headers=headers, body=body, model=ctx.model)

    def _log_start(self, ctx: LogContext, args: CompletionArgsDTO, **fields: Any) -> None:
        normalized_log_event(
            self._logger,
            "stream.start",
            ctx,
            phase="start",
            temperature=args.temperature,
            max_tokens=args.max_tokens,
            stop_count=len(args.stop) if args.stop is not None else None,
            **fields,
        )

    def _finish(self, tracker: _CallTracker, args: CompletionArgsDTO, ctx: LogContext) -> None:
        if not tracker.state.terminal:
            tracker.transition(StreamState.FAILED)
        error = tracker.error
        if isinstance(error, asyncio.CancelledError):
            error_code: Optional[str] = ErrorCode.CANCELLED.value
        else:
            error_code = classify_exception(error).value if isinstance(error, Exception) else None
        normalized_log_event(
            self._logger,
            "stream.error" if tracker.state is StreamState.FAILED else "stream.end",
            ctx,
            phase="finalize",
            emitted=len(tracker.parts),
            level=logging.ERROR if tracker.state is StreamState.FAILED else logging.INFO,
            error_code=error_code,
            error=(str(error) or type(error).__name__) if error is not None else None,
            state=tracker.state.value,
            from_state=tracker.previous_state.value if tracker.previous_state else None,
            metrics=tracker.metrics(),
        )
        self._record_completion_usage(tracker.accumulated, args.model, ctx)

    # ---- completion ----
    def stream_complete(
        self,
        prompt: str,
        options: Optional[CompletionOptions] = None,
        **overrides: Any,
    ) -> AsyncIterator[str]:
        """Stream a text completion for ``prompt``.

        Options are validated and the usage accounting gate is checked
        immediately, so ``UsageAccountingDisabled`` is raised by this call
        itself, before any network traffic.

        Yields:
            Text chunks in arrival order. JSON string lines are yielded
            verbatim, other JSON values as their JSON text and undecodable
            lines as raw text (``complete_policy``).

        Raises:
            UsageAccountingDisabled: accounting consent missing.
            ProviderError: invalid options (``VALIDATION``).
            TransportError: request failed or HTTP status >= 400.
            StreamReadError: connection lost mid-stream (after partial yields).
        """
        opts = self._resolve_options(options, overrides)
        args = self.build_args(opts)
        self._require_usage_accounting(args.model)
        return self._complete_stream(prompt, args, self._context(args.model, COMPLETE_PATH))

    async def _complete_stream(self, prompt: str, args: CompletionArgsDTO, ctx: LogContext) -> AsyncIterator[str]:
        tracker = _CallTracker()
        self._count_tokens(prompt, args.model, is_prompt=True)
        tracker.transition(StreamState.REQUEST_BUILT)
        headers = build_headers(await self._header_provider.get_headers())
        tracker.transition(StreamState.AUTH_RESOLVED)
        body = {"prompt": prompt, **args.to_body()}
        self._log_start(ctx, args, prompt_chars=len(prompt))

        response: Optional[httpx.Response] = None
        try:
            tracker.transition(StreamState.SENT)
            response = await self._open(COMPLETE_PATH, headers, body, ctx)
            async for value in stream_json(response, policy=self._complete_policy, ctx=ctx, logger=self._logger):
                tracker.transition(StreamState.STREAMING)
                text = value if isinstance(value, str) else json.dumps(value)
                tracker.emitted(text)
                yield text
            tracker.transition(StreamState.COMPLETED)
        except (GeneratorExit, asyncio.CancelledError) as e:
            tracker.interrupted(e)
            raise
        except Exception as e:
            tracker.error = e
            tracker.transition(StreamState.FAILED)
            raise
        finally:
            if response is not None:
                await response.aclose()
            self._finish(tracker, args, ctx)

    async def complete(self, prompt: str, options: Optional[CompletionOptions] = None, **overrides: Any) -> str:
        """Return the full completion text (drains ``stream_complete``)."""
        return "".join([chunk async for chunk in self.stream_complete(prompt, options, **overrides)])

    # ---- chat ----
    def stream_chat(
        self,
        messages: Sequence[Message],
        options: Optional[CompletionOptions] = None,
        **overrides: Any,
    ) -> AsyncIterator[Message]:
        """Stream an assistant answer to ``messages``.

        Auth failures are non-fatal: the request is then sent without an
        ``Authorization`` header and an ``auth.resolve_error`` event is
        logged. Elements carrying ``metadata`` are logged, not yielded.

        Yields:
            ``Message(role="assistant", content=<delta>)`` for every element
            with non-empty ``content``.

        Raises:
            Same as :meth:`stream_complete`.
        """
        opts = self._resolve_options(options, overrides)
        args = self.build_args(opts)
        self._require_usage_accounting(args.model)
        return self._chat_stream(list(messages), args, self._context(args.model, CHAT_PATH))

    async def _chat_stream(self, messages: List[Message], args: CompletionArgsDTO, ctx: LogContext) -> AsyncIterator[Message]:
        tracker = _CallTracker()
        self._count_tokens(join_messages_text(messages), args.model, is_prompt=True)
        tracker.transition(StreamState.REQUEST_BUILT)
        identity = await self._header_provider.get_headers()
        access_token = await self._resolve_access_token(ctx)
        headers = build_headers(identity, access_token)
        tracker.transition(StreamState.AUTH_RESOLVED)
        body = {
            "messages": [convert_message(m, image_detail=self._image_detail) for m in messages],
            **args.to_body(),
        }
        self._log_start(ctx, args, message_count=len(messages), authenticated=access_token is not None)

        response: Optional[httpx.Response] = None
        try:
            tracker.transition(StreamState.SENT)
            response = await self._open(CHAT_PATH, headers, body, ctx)
            async for value in stream_json(response, policy=self._chat_policy, ctx=ctx, logger=self._logger):
                tracker.transition(StreamState.STREAMING)
                if not isinstance(value, dict):
                    continue
                metadata = value.get("metadata")
                if isinstance(metadata, dict) and metadata:
                    normalized_log_event(
                        self._logger,
                        "stream.metadata",
                        ctx,
                        phase="mid_stream",
                        metadata=metadata,
                    )
                content = value.get("content")
                if content:
                    text = content if isinstance(content, str) else json.dumps(content)
                    tracker.emitted(text)
                    yield Message(role="assistant", content=text)
            tracker.transition(StreamState.COMPLETED)
        except (GeneratorExit, asyncio.CancelledError) as e:
            tracker.interrupted(e)
            raise
        except Exception as e:
            tracker.error = e
            tracker.transition(StreamState.FAILED)
            raise
        finally:
            if response is not None:
                await response.aclose()
            self._finish(tracker, args, ctx)

    async def chat(self, messages: Sequence[Message], options: Optional[CompletionOptions] = None, **overrides: Any) -> Message:
        """Return the full assistant message (drains ``stream_chat``)."""
        parts = [m.content async for m in self.stream_chat(messages, options, **overrides)]
        return Message(role="assistant", content="".join(p for p in parts if isinstance(p, str)))


__all__ = ["PearAIServerClient"]
