# adapters/anthropic_messages.py
from __future__ import annotations

import json
import time
from typing import Any, Dict, List, Optional

import requests
from loguru import logger

from adapters.messages import MessageResponse, build_request, parse_api_error
from errors import APIFailure, MalformedResponse, NetworkFailure
from models import LLMModel


class AnthropicMessagesAdapter:
    """
    Thin client for the Messages endpoint. One POST per call, no retries, no streaming.
    Every failure surfaces as NetworkFailure, APIFailure or MalformedResponse.
    """

    def __init__(self, model: LLMModel, api_key: str):
        self.model = model
        self._api_key = api_key
        logger.info(
            "AnthropicMessagesAdapter init → name='{}' endpoint='{}' max_tokens={}",
            model.name, model.endpoint, model.max_tokens,
        )

    @property
    def url(self) -> str:
        return (self.model.endpoint or "https://api.anthropic.com/v1").rstrip("/") + "/messages"

    def _headers(self) -> Dict[str, str]:
        return {
            "content-type": "application/json",
            "x-api-key": self._api_key,
            "anthropic-version": self.model.api_version,
        }

    def create_message(
        self,
        messages: List[Dict[str, str]],
        tools: Optional[List[Dict[str, Any]]] = None,
    ) -> MessageResponse:
        payload = build_request(self.model.resolved_model(), self.model.max_tokens, messages, tools)
        logger.info("messages.create → url='{}' model='{}' messages={} tools={}",
                    self.url, payload["model"], len(messages), len(tools or []))
        t0 = time.time()
        try:
            resp = requests.post(self.url, headers=self._headers(), json=payload, timeout=self.model.timeout)
        except requests.RequestException as e:
            logger.error("messages.create ✗ transport: {}", e)
            raise NetworkFailure(f"Network error: {e}") from e
        dt = (time.time() - t0) * 1000.0
        logger.info("messages.create ← status={} time_ms≈{:.0f}", resp.status_code, dt)

        if not 200 <= resp.status_code < 300:
            raise self._api_failure(resp)

        try:
            data = resp.json()
        except ValueError as e:
            logger.error("messages.create: undecodable body: {}", (resp.text or "")[:500])
            raise MalformedResponse(f"Could not decode response body: {e}") from e
        logger.debug("messages.create body: {}", json.dumps(data, indent=2, ensure_ascii=False)[:4000])

        parsed = MessageResponse.from_dict(data)
        logger.debug("messages.create: blocks={} tool_calls={} stop_reason={} usage=({}, {})",
                     len(parsed.content), len(parsed.tool_calls), parsed.stop_reason,
                     parsed.usage.input_tokens, parsed.usage.output_tokens)
        return parsed

    @staticmethod
    def _api_failure(resp: requests.Response) -> APIFailure:
        status = resp.status_code
        try:
            err_type, message = parse_api_error(resp.json())
        except ValueError:
            err_type, message = None, None
        if not message:
            message = "Unknown API error"
        logger.error("messages.create: HTTP {} type={} message={}", status, err_type, message)
        return APIFailure(message, status=status, error_type=err_type)
