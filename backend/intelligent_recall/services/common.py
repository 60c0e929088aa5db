from __future__ import annotations

import json
import logging
import re
from typing import Any, Callable, Dict, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from ..gemini_client import EmptyResponseError, GeminiClient, MalformedResponseError
from ..results import Failure, FailureReason, Result, Success


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

ClientFactory = Callable[[], GeminiClient]


def extract_json_object(text: str) -> Dict[str, Any]:
    try:
        data = json.loads(text)
    except Exception:
        data = None
    if isinstance(data, dict):
        return data
    code_block = re.search(r"```json\s*([\s\S]*?)\s*```", text)
    if code_block:
        try:
            data = json.loads(code_block.group(1))
        except Exception:
            data = None
        if isinstance(data, dict):
            return data
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last != -1 and last > first:
        try:
            data = json.loads(text[first : last + 1])
        except Exception:
            data = None
        if isinstance(data, dict):
            return data
    raise ValueError("Gemini did not return a JSON object")


def _classify_status_error(err: httpx.HTTPStatusError) -> Failure:
    code = err.response.status_code
    body = err.response.text or ""
    # AI Studio answers 400 INVALID_ARGUMENT for a bad key
    if code in (401, 403) or "API_KEY_INVALID" in body or "API key not valid" in body:
        return Failure(FailureReason.AUTH, "Gemini rejected the API key")
    return Failure(FailureReason.UPSTREAM, f"Gemini returned HTTP {code}")


async def call_structured(
    prompt: str,
    response_schema: Dict[str, Any],
    model_cls: Type[M],
    *,
    client_factory: ClientFactory = GeminiClient,
) -> Result[M]:
    """Run one Gemini call and parse the answer into ``model_cls``."""
    try:
        client = client_factory()
    except ValueError as err:
        return Failure(FailureReason.NOT_CONFIGURED, str(err))

    try:
        raw = await client.generate(prompt, response_schema=response_schema)
    except httpx.HTTPStatusError as err:
        failure = _classify_status_error(err)
        logger.warning("Gemini call failed (%s): %s", failure.reason.value, err)
        return failure
    except httpx.TimeoutException as err:
        logger.warning("Gemini call timed out: %s", err)
        return Failure(FailureReason.NETWORK, "Gemini request timed out")
    except httpx.RequestError as err:
        logger.warning("Gemini call failed (network): %s", err)
        return Failure(FailureReason.NETWORK, f"Could not reach Gemini: {err}")
    except EmptyResponseError as err:
        logger.warning("Gemini returned an empty response")
        return Failure(FailureReason.EMPTY_RESPONSE, str(err))
    except MalformedResponseError as err:
        logger.warning("Gemini returned a malformed envelope: %s", err)
        return Failure(FailureReason.MALFORMED_RESPONSE, str(err))
    finally:
        await client.aclose()

    try:
        data = extract_json_object(raw)
    except ValueError as err:
        logger.warning("Unparseable Gemini output: %.200s", raw)
        return Failure(FailureReason.MALFORMED_RESPONSE, str(err))
    try:
        value = model_cls.model_validate(data)
    except ValidationError as err:
        logger.warning("Gemini output did not match %s: %s", model_cls.__name__, err)
        return Failure(FailureReason.MALFORMED_RESPONSE, f"Gemini output did not match the {model_cls.__name__} shape")
    return Success(value)
