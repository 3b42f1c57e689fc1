#!/usr/bin/env python3
# ABOUTME: Model table, environment-driven settings and logging setup.
# ABOUTME: Used to pick providers, price usage and locate the preset store.

import logging
import os
from pathlib import Path
from typing import Dict, Any, List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.logging import RichHandler

DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_LOG_LEVEL = "WARNING"
CONFIG_DIR_NAME = ".quadslator"


class ModelConfig:
    """Configuration for supported models including token limits and pricing."""

    # Model configuration: max_tokens and cost per 1k tokens (input/output)
    MODELS: Dict[str, Dict[str, Any]] = {
        # Anthropic
        "claude-sonnet-4-5-20250929": {
            "provider": "anthropic",
            "max_tokens": 200000,
            "output_tokens": 8192,
            "input_cost": 0.003,  # $3.00 / 1M tokens
            "output_cost": 0.015,  # $15.00 / 1M tokens
        },
        "claude-opus-4-1-20250805": {
            "provider": "anthropic",
            "max_tokens": 200000,
            "output_tokens": 4096,
            "input_cost": 0.015,  # $15.00 / 1M tokens
            "output_cost": 0.075,  # $75.00 / 1M tokens
        },
        "claude-3-5-haiku-latest": {
            "provider": "anthropic",
            "max_tokens": 200000,
            "output_tokens": 8192,
            "input_cost": 0.0008,  # $0.80 / 1M tokens
            "output_cost": 0.004,  # $4.00 / 1M tokens
        },
        # OpenAI
        "gpt-5": {
            "provider": "openai",
            "max_tokens": 272000,
            "output_tokens": 128000,
            "input_cost": 0.00125,  # $1.25 / 1M tokens
            "output_cost": 0.01,  # $10.00 / 1M tokens
        },
        "gpt-5-mini": {
            "provider": "openai",
            "max_tokens": 272000,
            "output_tokens": 128000,
            "input_cost": 0.00025,  # $0.25 / 1M tokens
            "output_cost": 0.002,  # $2.00 / 1M tokens
        },
        "gpt-4.1": {
            "provider": "openai",
            "max_tokens": 1048576,
            "input_cost": 0.002,  # $2.00 / 1M tokens
            "output_cost": 0.008,  # $8.00 / 1M tokens
        },
        "gpt-4o": {
            "provider": "openai",
            "max_tokens": 128000,
            "input_cost": 0.0025,  # $2.50 / 1M tokens
            "output_cost": 0.01,  # $10.00 / 1M tokens
        },
        "gpt-4o-mini": {
            "provider": "openai",
            "max_tokens": 128000,
            "input_cost": 0.00015,  # $0.15 / 1M tokens
            "output_cost": 0.0006,  # $0.60 / 1M tokens
        },
    }

    @classmethod
    def get_model_info(cls, model: str) -> Dict[str, Any]:
        """Get configuration for a specific model."""
        return cls.MODELS.get(
            model, {"max_tokens": 4000, "input_cost": 0.0, "output_cost": 0.0}
        )

    @classmethod
    def get_input_cost(cls, model: str) -> float:
        """Get the input cost per 1k tokens for a model."""
        return cls.get_model_info(model).get("input_cost", 0.0)

    @classmethod
    def get_output_cost(cls, model: str) -> float:
        """Get the output cost per 1k tokens for a model."""
        return cls.get_model_info(model).get("output_cost", 0.0)

    @classmethod
    def get_output_tokens(cls, model: str) -> int:
        """Get the maximum output tokens for a model (4096 if not configured)."""
        return cls.get_model_info(model).get("output_tokens", 4096)

    @classmethod
    def get_provider(cls, model: str) -> str:
        """Get the provider for a specific model.

        Args:
            model: Model name

        Returns:
            Provider name ('openai', 'anthropic', or 'unknown')
        """
        return cls.get_model_info(model).get("provider", "unknown")

    @classmethod
    def get_models_by_provider(cls, provider: str) -> List[str]:
        """Get all models for a specific provider."""
        return [
            model for model, config in cls.MODELS.items()
            if config.get("provider") == provider
        ]

    @classmethod
    def is_anthropic_model(cls, model: str) -> bool:
        """Check if a model is from Anthropic."""
        return cls.get_provider(model) == "anthropic"

    @classmethod
    def is_openai_model(cls, model: str) -> bool:
        """Check if a model is from OpenAI."""
        return cls.get_provider(model) == "openai"


def get_config_paths() -> List[str]:
    """Get the possible .env locations in order of precedence."""
    home_dir = os.path.expanduser("~")
    return [
        os.path.join(os.getcwd(), ".env"),
        os.path.join(home_dir, CONFIG_DIR_NAME, ".env"),
        os.path.join(home_dir, ".config", "quadslator", ".env"),
    ]


def load_environment() -> None:
    """Load every .env file that exists; earlier files take precedence."""
    for env_path in get_config_paths():
        if os.path.exists(env_path):
            load_dotenv(env_path, override=False)


def get_default_model() -> str:
    return os.getenv("QUADSLATOR_MODEL") or DEFAULT_MODEL


def get_presets_path() -> Path:
    """Location of the key-value file holding saved context presets."""
    configured = os.getenv("QUADSLATOR_PRESETS_PATH")
    if configured:
        return Path(configured).expanduser()
    return Path.home() / CONFIG_DIR_NAME / "storage.json"


def setup_logging(console: Console, level: Optional[str] = None) -> None:
    """Route the quadslator loggers through a rich handler on the given console."""
    level_name = (level or os.getenv("LOG_LEVEL") or DEFAULT_LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    logger = logging.getLogger("quadslator")
    logger.handlers.clear()
    logger.addHandler(
        RichHandler(console=console, show_path=False, markup=False, rich_tracebacks=True)
    )
    logger.setLevel(numeric_level)
    logger.propagate = False
