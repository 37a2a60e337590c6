# markov_chain_model/core/context_keys.py
# Context <-> single string key, for JSON object keys.
# - "legacy": "[A, B]", readable, matches older model files, but lossy when a
#   token's text contains ", " or brackets.
# - "json":   '["A", "B"]', a compact JSON array, always reversible.

from __future__ import annotations

import json
import logging
from typing import List, Sequence

from markov_chain_model.core.errors import ContextKeyError

logger = logging.getLogger(__name__)

KEY_FORMAT_LEGACY = "legacy"
KEY_FORMAT_JSON = "json"
KEY_FORMATS = (KEY_FORMAT_LEGACY, KEY_FORMAT_JSON)

LEGACY_SEPARATOR = ", "


def check_key_format(key_format: str) -> str:
    if key_format not in KEY_FORMATS:
        raise ValueError(f"unknown key format {key_format!r} (expected one of {KEY_FORMATS})")
    return key_format


def is_ambiguous_legacy_text(text: str) -> bool:
    """True when a token text would not survive the legacy split."""
    return LEGACY_SEPARATOR in text or "[" in text or "]" in text or text.strip() == ""


# Encoding -------------------------------------------------------------------------
def encode_context_key(texts: Sequence[str], key_format: str = KEY_FORMAT_JSON) -> str:
    if key_format == KEY_FORMAT_JSON:
        return json.dumps(list(texts), ensure_ascii=False)
    if key_format == KEY_FORMAT_LEGACY:
        for t in texts:
            if is_ambiguous_legacy_text(t):
                logger.warning("token %r cannot be restored exactly from a legacy context key", t)
        return "[" + LEGACY_SEPARATOR.join(texts) + "]"
    raise ValueError(f"unknown key format {key_format!r}")


# Decoding -------------------------------------------------------------------------
def decode_context_key(key: str, key_format: str = KEY_FORMAT_JSON) -> List[str]:
    """
    Split a context key back into token texts.
    Raises ContextKeyError when the key does not have the expected shape or
    holds no tokens at all.
    """
    if key_format == KEY_FORMAT_JSON:
        texts = _decode_json_key(key)
    elif key_format == KEY_FORMAT_LEGACY:
        texts = _decode_legacy_key(key)
    else:
        raise ValueError(f"unknown key format {key_format!r}")

    if not texts:
        raise ContextKeyError(key, "context has no tokens")
    return texts


def _decode_legacy_key(key: str) -> List[str]:
    if not (key.startswith("[") and key.endswith("]")):
        raise ContextKeyError(key, "expected '[t1, t2, ...]'")
    body = key[1:-1]
    # empty fragments come from "[]" or doubled separators; they carry no token
    return [frag for frag in body.split(LEGACY_SEPARATOR) if frag.strip()]


def _decode_json_key(key: str) -> List[str]:
    try:
        value = json.loads(key)
    except ValueError as e:
        raise ContextKeyError(key, f"not a JSON array ({e})") from None
    if not isinstance(value, list):
        raise ContextKeyError(key, "not a JSON array")
    if not all(isinstance(v, str) for v in value):
        raise ContextKeyError(key, "array items must be strings")
    return value
