"""
markov_chain_model

Variable-order Markov chain: learn next-token counts from sequences, predict
with longest-context-first backoff, persist to JSON.

    from markov_chain_model import MarkovModel, StrTokenCodec

    m = MarkovModel(order=2, token_codec=StrTokenCodec())
    m.train(["the", "cat", "sat"])
    m.predict(["the"], top_tokens=3)   # [("cat", 100)]
"""

from .core import *  # noqa: F401,F403
from .core import __all__ as _core_all
from .utils.model_store import JsonDocumentStore

__all__ = list(_core_all) + ["JsonDocumentStore"]

__version__ = "0.1.0"
