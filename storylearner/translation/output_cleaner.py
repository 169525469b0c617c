"""
Output cleaning utilities for model completions.

Removes common wrapper artifacts so the token validator sees the payload the
model meant to return:
- <think>...</think> reasoning blocks
- Markdown code fences around a JSON document
"""

import re


def clean_completion_output(text: str) -> str:
    """
    Strip reasoning blocks and an enclosing code fence from a completion.

    Args:
        text: Raw model output

    Returns:
        Cleaned output, or the original text if cleaning would empty it
    """
    if not text:
        return text

    original = text

    # 1. Remove <think>...</think> and <thinking>...</thinking> blocks
    text = re.sub(r'<think>.*?</think>', '', text, flags=re.DOTALL | re.IGNORECASE)
    text = re.sub(r'<thinking>.*?</thinking>', '', text, flags=re.DOTALL | re.IGNORECASE)

    # 2. Unwrap ```json\n...\n``` or ```\n...\n```
    code_fence_pattern = r'^```(?:\w+)?\s*\n(.*?)\n```\s*$'
    match = re.match(code_fence_pattern, text.strip(), re.DOTALL)
    if match:
        text = match.group(1)

    text = text.strip()

    if not text:
        return original

    return text
