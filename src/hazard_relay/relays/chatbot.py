"""Relay for the external chatbot service."""

from __future__ import annotations

import logging
from typing import Any

from requests import Session

from hazard_relay.config import CHATBOT_URL
from hazard_relay.http import create_session

logger = logging.getLogger(__name__)


class ChatbotError(Exception):
    """The chatbot service could not produce a response."""


def ask_chatbot(
    question: str,
    url: str = CHATBOT_URL,
    timeout: float = 30,
    session: Session | None = None,
) -> Any:
    """Forward a question and return the service's JSON body unmodified.

    Raises:
        ChatbotError: on transport failure, a non-2xx status, or a body that
            is not JSON. There is no retry.
    """
    if session is None:
        session = create_session()

    try:
        resp = session.post(url, json={"question": question}, timeout=timeout)
        resp.raise_for_status()
        if resp.status_code >= 300:
            raise ValueError(f"unexpected status {resp.status_code}")
        return resp.json()
    except Exception as exc:
        raise ChatbotError(f"Chatbot request to {url} failed: {exc}") from exc
