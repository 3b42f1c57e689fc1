#!/usr/bin/env python3
# ABOUTME: Typed clients for the generation service: translations and context suggestions.
# ABOUTME: Every failure, including malformed model output, surfaces as GenerationError.

import logging
from typing import Any, Dict, List, Optional

import openai
import anthropic

from quadslator.errors import GenerationError
from quadslator.models import (
    TranslationRequest,
    parse_json_object,
    validate_suggestions,
    validate_translations,
)
from quadslator.prompts import Prompts
from quadslator.providers import EMPTY_USAGE, ProviderFactory

logger = logging.getLogger(__name__)


class GenerationClient:
    """Sends one prompt pair to the provider for a model and parses the JSON reply.

    The client keeps a log of the last call per operation (prompts, raw
    response, token usage) the same way for both translation and suggestion
    calls. No retry is performed; callers decide what to do with a
    GenerationError.
    """

    def __init__(
        self,
        model: str,
        openai_client: openai.OpenAI = None,
        anthropic_client: anthropic.Anthropic = None,
    ):
        """Initialize the client.

        Args:
            model: Model name, optionally prefixed with "openai:" or "anthropic:"
            openai_client: OpenAI client instance
            anthropic_client: Anthropic client instance
        """
        self.model = model
        self.openai_client = openai_client
        self.anthropic_client = anthropic_client
        self.generation_log: Dict[str, Dict[str, Any]] = {}
        self.last_usage: Dict[str, int] = dict(EMPTY_USAGE)

    def _generate_json(self, operation: str, system_prompt: str, user_prompt: str) -> Dict[str, Any]:
        try:
            provider = ProviderFactory.create_provider(
                self.model,
                openai_client=self.openai_client,
                anthropic_client=self.anthropic_client,
            )
        except ValueError as e:
            raise GenerationError(str(e)) from e

        logger.debug("%s prompt: %s", operation, user_prompt)
        text, usage, error = provider.generate(system_prompt, user_prompt, self.model)
        self.last_usage = usage or dict(EMPTY_USAGE)

        self.generation_log[operation] = {
            "model": self.model,
            "system_prompt": system_prompt,
            "user_prompt": user_prompt,
            "response": text,
            "usage": self.last_usage,
            "error": error,
        }

        if error:
            logger.error("%s failed: %s", operation, error)
            raise GenerationError(f"{operation.title()} failed: {error}")

        logger.debug("%s raw response: %s", operation, text)
        return parse_json_object(text)


class TranslationClient(GenerationClient):
    """Requests four alternative translations of a prompt."""

    def translate(self, prompt: str, context: str) -> List[str]:
        """Translate a prompt four different ways.

        Args:
            prompt: The text to translate; must be non-empty
            context: The translation context; blank becomes "general"

        Returns:
            Exactly four translations in model order

        Raises:
            GenerationError: On service failure or non-conforming output
        """
        request = TranslationRequest(prompt=prompt, context=context)
        payload = request.to_payload()
        data = self._generate_json(
            "translation",
            Prompts.translations_system_prompt(),
            Prompts.translations_user_prompt(payload["prompt"], payload["context"]),
        )
        return validate_translations(data)


class ContextSuggestionClient(GenerationClient):
    """Requests contexts that would help translate a prompt more accurately."""

    def suggest_contexts(self, prompt: str) -> List[str]:
        """Suggest translation contexts for a prompt.

        Raises:
            GenerationError: On service failure or non-conforming output
        """
        data = self._generate_json(
            "suggestion",
            Prompts.suggestions_system_prompt(),
            Prompts.suggestions_user_prompt(prompt),
        )
        return validate_suggestions(data)


def create_clients(
    model: str,
    openai_client: Optional[openai.OpenAI] = None,
    anthropic_client: Optional[anthropic.Anthropic] = None,
):
    """Build a (TranslationClient, ContextSuggestionClient) pair sharing API clients."""
    return (
        TranslationClient(model, openai_client=openai_client, anthropic_client=anthropic_client),
        ContextSuggestionClient(model, openai_client=openai_client, anthropic_client=anthropic_client),
    )
