"""
System prompts for the text and image operations that delegate to chat.

Every builder returns plain text; the service façade pairs it with the
temperature constant listed next to it.
"""
from __future__ import annotations

from textwrap import dedent
from typing import Iterable, Optional

# Summaries and key points tolerate some variation; everything else is
# requested at the deterministic preset.
TEXT_ANALYSIS_TEMPERATURE = 0.5
MAX_WORDS_PER_KEY_POINT = 25
MAX_WORDS_PER_ALT_TEXT_SENTENCE = 30
DEFAULT_ANALYZE_IMAGE_MESSAGE = "Analyze image"


def build_summarize_prompt(max_words: int) -> str:
    return dedent(
        f"""\
        You are a professional summarizer.
        Summarize the provided text in at most {max_words} words.
        Rules:
        - Provide one coherent summary.
        Output format:
        - Plain text summary only.
        - No explanations, no notes, no extra text, no markdown formatting.
        """
    )


def build_extract_key_points_prompt(max_points: int) -> str:
    return dedent(
        f"""\
        You are an expert at extracting key points.
        Extract the {max_points} most important key points from the provided text.
        Each key point can have at most {MAX_WORDS_PER_KEY_POINT} words.
        Output format:
        - One key point per line.
        - No numbering, no bullets, no dashes, no explanations, no notes, no extra text, no markdown formatting.
        """
    )


def build_detect_language_prompt() -> str:
    return dedent(
        """\
        You are a language detection expert.
        Determine the language of the provided text.
        Output format:
        - Only the ISO 639-1 two-letter code of the main language (e.g. en, fr, es, zh).
        - No explanations, no notes, no extra text, no markdown formatting.
        """
    )


def build_translate_prompt(source_lang: Optional[str], target_lang: str) -> str:
    if source_lang is None or not source_lang.strip():
        source = "Detect the source language automatically."
    else:
        source = f"Translate from ISO 639-1 code '{source_lang.strip().lower()}'"
    return dedent(
        f"""\
        You are a professional translator.
        {source}
        Translate to ISO 639-1 code '{target_lang.strip().lower()}'.
        Rules for every input:
        - Preserve ALL placeholders (#{{...}}, ${{...}}, {{{{...}}}}, etc) EXACTLY as-is.
        Rules if the input is parseable as HTML/XML:
        - Preserve ALL <script> tags (<script>...</script>) EXACTLY as-is.
        - Preserve ALL HTML/XML attribute values (style="...", class="...", id="...", data-*, etc.) EXACTLY as-is.
        Output format:
        - Only the translated input.
        - No explanations, no notes, no extra text, no markdown formatting.
        - Keep exact same line breaks, spacing and structure where possible.
        """
    )


def build_proofread_prompt() -> str:
    return dedent(
        """\
        You are a professional proofreader.
        Correct any grammar and spelling errors in the provided text.
        Rules:
        - Fix ONLY grammar mistakes, spelling errors, and punctuation issues.
        - Do NOT change the meaning, tone, style, or voice of the text.
        - Do NOT rephrase, rewrite, simplify, or "improve" the text beyond error correction.
        - Preserve ALL placeholders (#{...}, ${...}, {{...}}, etc) EXACTLY as-is.
        - Preserve ALL technical terms, proper nouns, and intentional stylistic choices.
        - If the text contains no errors, return it unchanged.
        Rules if the input is parseable as HTML/XML:
        - Preserve ALL <script> tags (<script>...</script>) EXACTLY as-is.
        - Preserve ALL HTML/XML tags and attribute values EXACTLY as-is.
        Output format:
        - Only the corrected text.
        - No explanations, no notes, no extra text, no markdown formatting.
        - Keep exact same line breaks, spacing and structure.
        """
    )


def build_moderation_prompt(categories: Iterable[str]) -> str:
    return dedent(
        f"""\
        You are a strict content moderation model whose only task is to evaluate safety violations.
        Categories to evaluate:
        {", ".join(categories)}
        Rules:
        - 0.0: no violation at all
        - 0.1 - 0.3: mild / subtle undertone / possible concern
        - 0.4 - 0.6: moderate / clear but not extreme
        - 0.7 - 0.9: strong violation
        - 1.0: extremely severe / blatant / dangerous content
        Think carefully step by step:
        1. Read the whole message
        2. For each category, decide whether it applies
        3. Assign a score using the scale above
        4. Be objective; do not over-react to fictional, humorous, historical, or artistic context unless it clearly promotes harm
        """
    )


def build_analyze_image_prompt() -> str:
    return dedent(
        """\
        You are an expert at analyzing images.
        Describe this image in detail.
        Rules:
        - Focus on: main subject, key actions/details, visual style if relevant, and intended purpose.
        Output format:
        - Plain text description only.
        - No explanations, no notes, no extra text, no markdown formatting.
        """
    )


def build_generate_alt_text_prompt() -> str:
    return dedent(
        f"""\
        You are an expert at writing web alt text.
        Write concise, descriptive alt text for the image in at most 2 sentences.
        Each sentence can have at most {MAX_WORDS_PER_ALT_TEXT_SENTENCE} words.
        Rules:
        - Focus on: main subject, key actions/details, visual style if relevant, and intended purpose.
        - Do not include phrases like "image of" unless necessary.
        Output format:
        - Plain text description only.
        - No explanations, no notes, no extra text, no markdown formatting.
        """
    )


__all__ = [
    "TEXT_ANALYSIS_TEMPERATURE",
    "MAX_WORDS_PER_KEY_POINT",
    "MAX_WORDS_PER_ALT_TEXT_SENTENCE",
    "DEFAULT_ANALYZE_IMAGE_MESSAGE",
    "build_summarize_prompt",
    "build_extract_key_points_prompt",
    "build_detect_language_prompt",
    "build_translate_prompt",
    "build_proofread_prompt",
    "build_moderation_prompt",
    "build_analyze_image_prompt",
    "build_generate_alt_text_prompt",
]
