#!/usr/bin/env python3
# ABOUTME: Contains the prompts used for translations and context suggestions.
# ABOUTME: Both prompts ask the model for a single JSON object.


class Prompts:
    """Class containing all prompts sent to the generation service."""

    @staticmethod
    def translations_system_prompt() -> str:
        """Get the system prompt for generating four translations.

        Returns:
            The system prompt for translation
        """
        return (
            "You are a translation expert. You will generate four unique translations "
            "of the given prompt, considering the provided context. "
            'Respond only with a JSON object of the form {"translations": ["...", "...", "...", "..."]} '
            "containing exactly four strings and no other fields."
        )

    @staticmethod
    def translations_user_prompt(prompt: str, context: str) -> str:
        """Get the user prompt for generating four translations.

        Args:
            prompt: The text to translate, embedded verbatim
            context: The translation context, embedded verbatim

        Returns:
            The user prompt for translation
        """
        return f"Prompt: {prompt}\nContext: {context}"

    @staticmethod
    def suggestions_system_prompt() -> str:
        """Get the system prompt for proposing translation contexts."""
        return (
            "You are an AI assistant designed to provide helpful context suggestions "
            "for improving translation quality. Given the following prompt, suggest three "
            "different contexts that could be relevant for translating the prompt more "
            'accurately. Respond only with a JSON object of the form {"suggestions": ["...", "...", "..."]}.'
        )

    @staticmethod
    def suggestions_user_prompt(prompt: str) -> str:
        return f"Prompt: {prompt}"
