#!/usr/bin/env python3
# ABOUTME: Multi-provider abstraction for the generation service.
# ABOUTME: Supports OpenAI and Anthropic models with a unified interface.

import logging
from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

import openai
import anthropic

from quadslator.config import ModelConfig

logger = logging.getLogger(__name__)

EMPTY_USAGE = {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}

# Models that only accept the default sampling temperature
FIXED_TEMPERATURE_PREFIXES = ("o1", "o3", "o4", "gpt-5")


def strip_provider_prefix(model: str) -> str:
    """Remove an "openai:" or "anthropic:" prefix from a model name."""
    return model.split(":", 1)[-1] if ":" in model else model


class AIProvider(ABC):
    """Abstract base class for AI providers."""

    @abstractmethod
    def generate(
        self, system_prompt: str, user_prompt: str, model: str
    ) -> Tuple[Optional[str], Dict, Optional[str]]:
        """Send one prompt pair and return (text, usage, error)."""
        pass


class OpenAIProvider(AIProvider):
    """OpenAI API provider implementation."""

    def __init__(self, client: openai.OpenAI):
        self.client = client

    def generate(
        self, system_prompt: str, user_prompt: str, model: str
    ) -> Tuple[Optional[str], Dict, Optional[str]]:
        """Generate a JSON response using the OpenAI chat completions API."""
        try:
            actual_model = strip_provider_prefix(model)

            params = {
                "model": actual_model,
                "messages": [
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
                "response_format": {"type": "json_object"},
            }

            if not actual_model.startswith(FIXED_TEMPERATURE_PREFIXES):
                params["temperature"] = 0.7

            logger.debug("OpenAI request to %s", actual_model)
            response = self.client.chat.completions.create(**params)
            text = response.choices[0].message.content

            usage_dict = {
                "prompt_tokens": response.usage.prompt_tokens,
                "completion_tokens": response.usage.completion_tokens,
                "total_tokens": response.usage.total_tokens,
            }

            return text, usage_dict, None

        except Exception as e:
            return None, dict(EMPTY_USAGE), str(e)


class AnthropicProvider(AIProvider):
    """Anthropic Claude API provider implementation."""

    def __init__(self, client: anthropic.Anthropic):
        self.client = client

    def generate(
        self, system_prompt: str, user_prompt: str, model: str
    ) -> Tuple[Optional[str], Dict, Optional[str]]:
        """Generate a JSON response using the Anthropic messages API."""
        try:
            actual_model = strip_provider_prefix(model)

            params = {
                "model": actual_model,
                "max_tokens": ModelConfig.get_output_tokens(actual_model),
                "system": system_prompt,
                "messages": [
                    {"role": "user", "content": user_prompt}
                ],
            }

            logger.debug("Anthropic request to %s", actual_model)
            response = self.client.messages.create(**params)
            text = "".join(
                block.text for block in response.content if getattr(block, "type", "text") == "text"
            )

            usage_dict = {
                "prompt_tokens": response.usage.input_tokens,
                "completion_tokens": response.usage.output_tokens,
                "total_tokens": response.usage.input_tokens + response.usage.output_tokens,
            }

            return text, usage_dict, None

        except Exception as e:
            return None, dict(EMPTY_USAGE), str(e)


class ProviderFactory:
    """Factory for creating appropriate AI providers."""

    @staticmethod
    def create_provider(model: str, openai_client=None, anthropic_client=None) -> AIProvider:
        """Create the appropriate provider for the given model.

        Args:
            model: Model name (supports prefixes like "openai:gpt-4o" or "anthropic:claude-3")
            openai_client: OpenAI client instance
            anthropic_client: Anthropic client instance

        Returns:
            Appropriate provider instance

        Raises:
            ValueError: If model is not supported or required client is missing
        """
        if ":" in model:
            provider_prefix, model_name = model.split(":", 1)
            provider_prefix = provider_prefix.lower()
        else:
            provider_prefix = None
            model_name = model

        if provider_prefix == "openai" or (provider_prefix is None and ModelConfig.is_openai_model(model_name)):
            if openai_client is None:
                raise ValueError("OpenAI client required for OpenAI models")
            return OpenAIProvider(openai_client)

        elif provider_prefix == "anthropic" or (provider_prefix is None and ModelConfig.is_anthropic_model(model_name)):
            if anthropic_client is None:
                raise ValueError("Anthropic client required for Anthropic models")
            return AnthropicProvider(anthropic_client)

        else:
            raise ValueError(f"Unsupported model: {model}")
