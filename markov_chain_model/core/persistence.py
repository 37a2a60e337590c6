# markov_chain_model/core/persistence.py
"""
Persistence codec: transition table <-> structured document.

The document is what a DocumentStore writes as JSON:
  {"order": 2, "key_format": "json", "transitions": {<context key>: {<token>: count}}}

Legacy documents (no "key_format") use "[A, B]" context keys.

Notes:
 - Two contexts (or two tokens of one histogram) that render to the same
   text raise TokenEncodeError instead of overwriting each other.
 - An empty table encodes to None: there is nothing to persist, not even the
   order. Callers see this as SaveResult.NOTHING_TO_PERSIST.
 - Decoding builds a complete new table before returning, so a bad document
   never reaches the model half-read.
 - Histogram key order in the document is kept; it is the tie-break order
   used by predict().
"""

from __future__ import annotations

import enum
import logging
from collections import Counter
from typing import Any, Callable, Dict, Mapping, Optional, Tuple

from markov_chain_model.core.context_keys import (
    KEY_FORMAT_JSON,
    KEY_FORMAT_LEGACY,
    KEY_FORMATS,
    decode_context_key,
    encode_context_key,
)
from markov_chain_model.core.errors import (
    ContextKeyError,
    MalformedDocumentError,
    TokenCodecMissingError,
    TokenEncodeError,
)
from markov_chain_model.core.protocols import ModelDocument, TokenCodec

logger = logging.getLogger(__name__)

Context = Tuple[Any, ...]
TransitionTable = Dict[Context, Counter]


class SaveResult(enum.Enum):
    WRITTEN = "written"
    NOTHING_TO_PERSIST = "nothing_to_persist"


def _is_int(v: Any) -> bool:
    return isinstance(v, int) and not isinstance(v, bool)


# Encoding ----------------------------------------------------------------------------
def encode_document(table: Mapping[Context, Mapping[Any, int]],
                    order: int,
                    token_codec: Optional[TokenCodec] = None,
                    key_format: str = KEY_FORMAT_JSON) -> Optional[ModelDocument]:
    """
    Render table as a document, or return None when the table is empty.
    Without a codec, tokens are written in their str() form.
    """
    if not table:
        return None
    if key_format not in KEY_FORMATS:
        raise ValueError(f"unknown key format {key_format!r}")

    to_text: Callable[[Any], str] = token_codec.encode if token_codec is not None else str

    transitions: Dict[str, Dict[str, int]] = {}
    for context, hist in table.items():
        key = encode_context_key([to_text(t) for t in context], key_format)
        if key in transitions:
            raise TokenEncodeError(
                f"context {context!r} encodes to key {key!r}, already used by another context"
            )
        rendered: Dict[str, int] = {}
        for tok, count in hist.items():
            text = to_text(tok)
            if text in rendered:
                raise TokenEncodeError(
                    f"token {tok!r} under {key!r} encodes to {text!r}, already used by another token"
                )
            rendered[text] = int(count)
        transitions[key] = rendered

    doc: ModelDocument = {"order": order, "transitions": transitions}
    if key_format != KEY_FORMAT_LEGACY:
        doc["key_format"] = key_format
    return doc


# Decoding ----------------------------------------------------------------------------
def decode_document(document: Any, token_codec: Optional[TokenCodec]) -> Tuple[int, TransitionTable]:
    """
    Rebuild (order, table) from a parsed document.
    Raises a ModelDecodeError subclass on any structural or token problem.
    """
    if token_codec is None:
        raise TokenCodecMissingError(
            "model has no token codec; pass token_codec=... to rebuild tokens on load"
        )
    if not isinstance(document, Mapping):
        raise MalformedDocumentError(f"document root must be an object, got {type(document).__name__}")

    order = document.get("order")
    if not _is_int(order) or order < 1:
        raise MalformedDocumentError(f"'order' must be a positive integer, got {order!r}")

    key_format = document.get("key_format", KEY_FORMAT_LEGACY)
    if key_format not in KEY_FORMATS:
        raise MalformedDocumentError(f"unknown 'key_format' {key_format!r}")

    raw = document.get("transitions")
    if not isinstance(raw, Mapping):
        raise MalformedDocumentError("'transitions' must be an object")

    table: TransitionTable = {}
    for key, raw_hist in raw.items():
        texts = decode_context_key(key, key_format)
        if len(texts) > order:
            raise ContextKeyError(key, f"context length {len(texts)} exceeds order {order}")
        context = tuple(token_codec.decode(t) for t in texts)
        if context in table:
            raise ContextKeyError(key, "duplicates an earlier context")
        table[context] = _decode_histogram(key, raw_hist, token_codec)

    logger.debug("decoded %d contexts (order=%d, key_format=%s)", len(table), order, key_format)
    return order, table


def _decode_histogram(key: str, raw_hist: Any, token_codec: TokenCodec) -> Counter:
    if not isinstance(raw_hist, Mapping) or not raw_hist:
        raise MalformedDocumentError(f"histogram for {key!r} must be a non-empty object")

    hist: Counter = Counter()
    for text, count in raw_hist.items():
        if not _is_int(count) or count < 1:
            raise MalformedDocumentError(
                f"count for {text!r} under {key!r} must be a positive integer, got {count!r}"
            )
        token = token_codec.decode(text)
        if token in hist:
            raise MalformedDocumentError(f"token {text!r} appears twice under {key!r}")
        hist[token] = count
    return hist
