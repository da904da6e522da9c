"""
Test data factories for generating test objects.

This module provides Factory Boy factories for creating conversation records
and request payloads with realistic default values and easy customization.
"""

import factory

from app.schemas.conversation import ConversationCreate
from models import Conversation


class ConversationFactory(factory.Factory):
    """Factory for unsaved Conversation rows; add them to a session to persist."""

    class Meta:
        model = Conversation

    user_message = factory.Faker("sentence", nb_words=6)
    ai_response = factory.Faker("paragraph", nb_sentences=2)
    system_prompt = "You are a helpful Hindi AI assistant. Answer in Hindi."


class ConversationCreateFactory(factory.Factory):
    """Factory for validated conversation input."""

    class Meta:
        model = ConversationCreate

    user_message = factory.Sequence(lambda n: f"सवाल {n}")
    ai_response = factory.Sequence(lambda n: f"जवाब {n}")
    system_prompt = "You are a helpful Hindi AI assistant. Answer in Hindi."


class ConversationPayloadFactory(factory.DictFactory):
    """Factory for camelCase REST payloads."""

    userMessage = factory.Faker("sentence", nb_words=5)
    aiResponse = factory.Faker("sentence", nb_words=8)
    systemPrompt = "You are a helpful Hindi AI assistant."
