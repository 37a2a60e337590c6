# markov_chain_model/core/shared_model.py
"""
SharedMarkovModel - one MarkovModel shared by many threads.

MarkovModel itself has no locking. This wrapper puts the table behind a
single-writer / multi-reader lock:
 - writers: train, train_many, load, load_document
 - readers: predict, histogram, stats, to_document, save (snapshot only)

File I/O happens outside the lock: save() snapshots the document under the
read lock then writes it; load() reads the file first, then swaps the table in
under the write lock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterable, Iterator, List, Optional, Sequence

from markov_chain_model.core.markov_model import MarkovModel, Prediction
from markov_chain_model.core.persistence import SaveResult
from markov_chain_model.core.protocols import ModelDocument


class ReadWriteLock:
    """Writer-preferring readers/writer lock (waiting writers block new readers)."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read_locked(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if self._readers == 0:
                    self._cond.notify_all()

    @contextmanager
    def write_locked(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class SharedMarkovModel:
    """Thread-safe facade over a MarkovModel."""

    def __init__(self, model: MarkovModel):
        self._model = model
        self._lock = ReadWriteLock()

    @property
    def order(self) -> int:
        with self._lock.read_locked():
            return self._model.order

    # writers -------------------------------------------------------------------
    def train(self, sequence: Iterable[Any]) -> None:
        seq = tuple(sequence)
        with self._lock.write_locked():
            self._model.train(seq)

    def train_many(self, sequences: Iterable[Iterable[Any]]) -> None:
        batch = [tuple(s) for s in sequences]
        with self._lock.write_locked():
            self._model.train_many(batch)

    def load_document(self, document: Any) -> None:
        with self._lock.write_locked():
            self._model.load_document(document)

    def load(self, path: str) -> None:
        doc = self._model.store.read_tree(path)
        self.load_document(doc)

    # readers -------------------------------------------------------------------
    def predict(self, context: Sequence[Any], top_tokens: int) -> List[Prediction]:
        with self._lock.read_locked():
            return self._model.predict(context, top_tokens)

    def histogram(self, context: Sequence[Any]) -> Optional[Dict[Any, int]]:
        with self._lock.read_locked():
            return self._model.histogram(context)

    def stats(self) -> Dict[str, Any]:
        with self._lock.read_locked():
            return self._model.stats()

    def to_document(self, key_format: Optional[str] = None) -> Optional[ModelDocument]:
        with self._lock.read_locked():
            return self._model.to_document(key_format)

    def save(self, path: str, key_format: Optional[str] = None) -> SaveResult:
        doc = self.to_document(key_format)
        if doc is None:
            return SaveResult.NOTHING_TO_PERSIST
        self._model.store.write(path, doc)
        return SaveResult.WRITTEN
