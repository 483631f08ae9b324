"""Pass-through relays to external services."""

from hazard_relay.relays.chatbot import ChatbotError, ask_chatbot
from hazard_relay.relays.prediction import PredictionResult, predict_impact

__all__ = ["ChatbotError", "PredictionResult", "ask_chatbot", "predict_impact"]
