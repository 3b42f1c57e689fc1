#!/usr/bin/env python3
# ABOUTME: Cost calculation for generation service usage.
# ABOUTME: Turns recorded token usage into a dollar figure for display.

from typing import Dict, Tuple

from quadslator.config import ModelConfig
from quadslator.providers import strip_provider_prefix


class CostEstimator:
    """Cost calculation for generation service usage."""

    @staticmethod
    def calculate_actual_cost(usage: Dict[str, int], model: str) -> Tuple[float, str]:
        """Calculate the actual cost based on token usage.

        Args:
            usage: Dictionary with 'prompt_tokens' and 'completion_tokens' keys
            model: The model name used for generation (provider prefix allowed)

        Returns:
            Tuple containing:
                - Actual cost as a float
                - Formatted cost string
        """
        model_name = strip_provider_prefix(model)
        input_cost = ModelConfig.get_input_cost(model_name)
        output_cost = ModelConfig.get_output_cost(model_name)

        prompt_cost = (usage.get("prompt_tokens", 0) / 1000) * input_cost
        completion_cost = (usage.get("completion_tokens", 0) / 1000) * output_cost
        total_cost = prompt_cost + completion_cost

        if total_cost < 0.01:
            cost_str = "Less than $0.01"
        else:
            cost_str = f"${total_cost:.4f}"

        return (total_cost, cost_str)
