# markov_chain_model/core/markov_model.py
"""
MarkovModel - variable-order Markov chain over tokens of any hashable type.

Training collects, for every position in a sequence, the next-token counts
for every context length 1..order. With order=3 and [A, B, C, D]:

    len 1: [A] -> B,  [B] -> C,  [C] -> D
    len 2: [A, B] -> C,  [B, C] -> D
    len 3: [A, B, C] -> D

Prediction backs off from the longest usable context (min(len(context), order))
to shorter suffixes until one has statistics, then ranks that histogram.

Public API:
  - train(sequence) / train_many(sequences)
  - predict(context, top_tokens) -> [(token, percent)]
  - histogram(context), transitions(), stats(), len(model)
  - to_document() / load_document(doc)
  - save(path) -> SaveResult / load(path)

Not thread-safe; wrap in SharedMarkovModel when one instance is shared.
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import Any, Dict, Generic, Iterable, List, Optional, Sequence, Tuple

from markov_chain_model.core.context_keys import KEY_FORMAT_JSON, check_key_format
from markov_chain_model.core.persistence import (
    SaveResult,
    TransitionTable,
    decode_document,
    encode_document,
)
from markov_chain_model.core.protocols import DocumentStore, ModelDocument, T, TokenCodec

logger = logging.getLogger(__name__)

Prediction = Tuple[Any, int]


def _percent(count: int, total: int) -> int:
    """round(count / total * 100), halves rounded up, in exact integer math."""
    return (200 * count + total) // (2 * total)


class MarkovModel(Generic[T]):
    """
    Args:
    order: maximum context length, a positive int.
    token_codec: converts tokens to/from text for persistence. Required for load().
    key_format: context key format used by save() ("json" or "legacy").
    store: DocumentStore for save()/load(). Defaults to JsonDocumentStore.
    """

    def __init__(self,
                 order: int,
                 token_codec: Optional[TokenCodec[T]] = None,
                 key_format: str = KEY_FORMAT_JSON,
                 store: Optional[DocumentStore] = None):
        if isinstance(order, bool) or not isinstance(order, int) or order < 1:
            raise ValueError(f"order must be a positive integer, got {order!r}")
        self._order = order
        self._codec = token_codec
        self._key_format = check_key_format(key_format)
        self._store = store
        # context tuple -> Counter(next token); Counter keeps first-seen order
        self._transitions: TransitionTable = {}

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------
    @property
    def order(self) -> int:
        return self._order

    @property
    def token_codec(self) -> Optional[TokenCodec[T]]:
        return self._codec

    @property
    def key_format(self) -> str:
        return self._key_format

    @property
    def store(self) -> DocumentStore:
        if self._store is None:
            from markov_chain_model.utils.model_store import JsonDocumentStore
            self._store = JsonDocumentStore()
        return self._store

    # ------------------------------------------------------------------
    # Training
    # ------------------------------------------------------------------
    def train(self, sequence: Iterable[T]) -> None:
        """Add the transitions of one sequence. Sequences of length <= 1 change nothing."""
        seq = tuple(sequence)
        n = len(seq)
        if n <= 1:
            return

        for i in range(n):
            # n - i - 1 tokens follow position i, so seq[i + length] always exists
            for length in range(1, min(self._order, n - i - 1) + 1):
                context = seq[i:i + length]
                nxt = seq[i + length]
                hist = self._transitions.get(context)
                if hist is None:
                    hist = self._transitions[context] = Counter()
                hist[nxt] += 1

        logger.debug("trained on %d tokens, table now has %d contexts", n, len(self._transitions))

    def train_many(self, sequences: Iterable[Iterable[T]]) -> None:
        for s in sequences:
            self.train(s)

    # ------------------------------------------------------------------
    # Prediction
    # ------------------------------------------------------------------
    def predict(self, context: Sequence[T], top_tokens: int) -> List[Prediction]:
        """
        Return up to top_tokens (token, percent) pairs for what follows context.
        Ties on count keep the order in which the tokens were first observed.
        An unseen context at every backoff level gives [].
        """
        if isinstance(top_tokens, bool) or not isinstance(top_tokens, int) or top_tokens < 1:
            raise ValueError(f"top_tokens must be a positive integer, got {top_tokens!r}")

        ctx = tuple(context)
        k = min(len(ctx), self._order)
        while k > 0:
            hist = self._transitions.get(ctx[-k:])
            if hist:
                total = sum(hist.values())
                # sorted() is stable, so equal counts stay in insertion order
                ranked = sorted(hist.items(), key=lambda kv: kv[1], reverse=True)
                return [(tok, _percent(c, total)) for tok, c in ranked[:top_tokens]]
            k -= 1
        return []

    # ------------------------------------------------------------------
    # Introspection helpers
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._transitions)

    def is_empty(self) -> bool:
        return not self._transitions

    def histogram(self, context: Sequence[T]) -> Optional[Dict[T, int]]:
        hist = self._transitions.get(tuple(context))
        return dict(hist) if hist is not None else None

    def transitions(self) -> Dict[Tuple[T, ...], Dict[T, int]]:
        """Copy of the whole table (contexts -> {token: count})."""
        return {ctx: dict(hist) for ctx, hist in self._transitions.items()}

    def stats(self) -> Dict[str, Any]:
        by_len: Dict[int, int] = {}
        pairs = 0
        observations = 0
        for ctx, hist in self._transitions.items():
            by_len[len(ctx)] = by_len.get(len(ctx), 0) + 1
            pairs += len(hist)
            observations += sum(hist.values())
        return {
            "order": self._order,
            "contexts": len(self._transitions),
            "transitions": pairs,
            "observations": observations,
            "contexts_by_length": dict(sorted(by_len.items())),
        }

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------
    def to_document(self, key_format: Optional[str] = None) -> Optional[ModelDocument]:
        """Document for the current table, or None when nothing has been learned."""
        fmt = check_key_format(key_format) if key_format else self._key_format
        return encode_document(self._transitions, self._order, self._codec, fmt)

    def load_document(self, document: Any) -> None:
        """Replace order and table with the decoded document. On error nothing changes."""
        order, table = decode_document(document, self._codec)
        if order != self._order:
            logger.info("loaded model changes order from %d to %d", self._order, order)
        self._order, self._transitions = order, table

    def save(self, path: str, key_format: Optional[str] = None) -> SaveResult:
        """
        Write the model to path. An untrained model writes nothing (the file,
        if any, is left as it was) and returns SaveResult.NOTHING_TO_PERSIST.
        """
        doc = self.to_document(key_format)
        if doc is None:
            logger.info("model is empty, nothing written to %s", path)
            return SaveResult.NOTHING_TO_PERSIST
        self.store.write(path, doc)
        logger.info("saved %d contexts to %s", len(doc["transitions"]), path)
        return SaveResult.WRITTEN

    def load(self, path: str) -> None:
        doc = self.store.read_tree(path)
        self.load_document(doc)
        logger.info("loaded %d contexts from %s", len(self._transitions), path)
