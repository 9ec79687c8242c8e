"""Structured transaction extraction from statement text via OpenAI.

Public API:
    - :func:`extract_transactions`
    - :func:`create_client`

One Responses API call per document, temperature ``0``, strict JSON schema.
No retries. Every failure (transport, HTTP status, JSON or shape problems) is
returned as a failed :class:`~statement_csv.models.ExtractionResult` instead
of an exception, so one bad document never aborts a batch.
"""

from __future__ import annotations

import json
import time
from collections.abc import Mapping
from typing import Any

from openai import OpenAI
from openai.types.responses import ResponseTextConfigParam
from pydantic import ValidationError

from . import prompting
from .config import DEFAULT_MODEL
from .errors import ExtractionError
from .logging_setup import get_logger
from .models import ExtractionResult, LlmTransaction, Transaction

_logger = get_logger("statement_csv.extraction")


def create_client() -> OpenAI:
    return OpenAI()


def _extract_response_json_mapping(resp: Any) -> Mapping[str, Any]:
    """Decode the JSON object from an OpenAI Responses SDK result.

    Prefers ``resp.output_text``; falls back to
    ``resp.output[0].content[0].text``. Raises :class:`ExtractionError` when no
    text is found, the text is not JSON, or the JSON is not an object.
    """

    text: str | None = getattr(resp, "output_text", None)
    if not text:
        try:
            first = resp.output[0] if getattr(resp, "output", None) else None
            content = getattr(first, "content", None)
            if content:
                txt_obj = getattr(content[0], "text", None)
                if isinstance(txt_obj, str):
                    text = txt_obj
                else:
                    maybe_val = getattr(txt_obj, "value", None)
                    if isinstance(maybe_val, str):
                        text = maybe_val
        except (AttributeError, IndexError, TypeError):
            text = None
    if not text or not isinstance(text, str):
        raise ExtractionError("Unexpected Responses API shape; unable to locate text output")

    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as e:
        raise ExtractionError("Model output was not valid JSON") from e
    if not isinstance(decoded, Mapping):
        raise ExtractionError("Model output was JSON but not an object")
    return decoded


def parse_transactions(body: Mapping[str, Any]) -> list[Transaction]:
    """Turn the decoded response body into validated transactions.

    A missing ``transactions`` key counts as zero transactions. A value that
    is not a list is an :class:`ExtractionError`. Individual candidates that
    fail validation (e.g. no numeric ``amount``) are dropped with a warning.
    """

    raw = body.get(prompting.TRANSACTIONS_KEY)
    if raw is None:
        return []
    if not isinstance(raw, list):
        raise ExtractionError(
            f"'{prompting.TRANSACTIONS_KEY}' must be a list, got {type(raw).__name__}"
        )

    out: list[Transaction] = []
    for pos, item in enumerate(raw):
        if not isinstance(item, Mapping):
            _logger.warning("extract:skip_candidate pos=%d reason=not_an_object", pos)
            continue
        try:
            out.append(LlmTransaction.model_validate(item).to_transaction())
        except ValidationError as e:
            _logger.warning(
                "extract:skip_candidate pos=%d reason=invalid errors=%d", pos, e.error_count()
            )
    return out


def extract_transactions(
    text: str,
    *,
    client: OpenAI | None = None,
    model: str = DEFAULT_MODEL,
    temperature: float = 0.0,
    source: str = "",
) -> ExtractionResult:
    """Extract all transactions contained in one statement's ``text``.

    Whitespace-only ``text`` short-circuits to an ``EMPTY_TEXT`` result
    without contacting the service. ``source`` is only used for logging.
    """

    if not text.strip():
        _logger.info("extract:skip_empty_text source=%s", source)
        return ExtractionResult.empty_text()

    text_cfg = ResponseTextConfigParam(format=prompting.build_response_format())
    t0 = time.perf_counter()
    try:
        api = client if client is not None else create_client()
        resp = api.responses.create(
            model=model,
            instructions=prompting.build_system_instructions(),
            input=text,
            temperature=temperature,
            text=text_cfg,
        )
        body = _extract_response_json_mapping(resp)
        transactions = parse_transactions(body)
    except Exception as e:  # noqa: BLE001 - any failure becomes a failed result
        dt_ms = (time.perf_counter() - t0) * 1000.0
        _logger.error(
            "extract:failed source=%s latency_ms=%.2f error=%s: %s",
            source,
            dt_ms,
            e.__class__.__name__,
            e,
        )
        return ExtractionResult.failure(f"{e.__class__.__name__}: {e}")

    dt_ms = (time.perf_counter() - t0) * 1000.0
    _logger.info(
        "extract:done source=%s transactions=%d latency_ms=%.2f",
        source,
        len(transactions),
        dt_ms,
    )
    return ExtractionResult.success(transactions)


__all__ = ["create_client", "extract_transactions", "parse_transactions"]
