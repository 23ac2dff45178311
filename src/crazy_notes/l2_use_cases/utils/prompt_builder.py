"""Pure functions for building LLM prompts."""

from __future__ import annotations


def build_title_prompt(transcript: str, title_length: int) -> str:
    """Ask for a condensed title of roughly *title_length* characters."""
    return f'Condense the following content into {title_length} characters: {transcript}'


def build_assistant_prompt(prompt: str, *, summarize: bool = False) -> str:
    if summarize:
        return f'Summarize: {prompt}'
    return prompt


def build_one_sentence_prompt(text: str) -> str:
    """Follow-up request used to name a saved assistant answer."""
    return f'Summarize the text above in one sentence: {text}'
