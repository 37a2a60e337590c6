# markov_chain_model/core/protocols.py
"""
Protocol interfaces for the collaborators of MarkovModel.

The model only depends on these small shapes, not on concrete classes, so a
caller can plug in its own token codec or document store (tests use simple
recording fakes).
"""

from __future__ import annotations

from typing import Any, Dict, Protocol, TypeVar, runtime_checkable
from typing_extensions import NotRequired, TypedDict


T = TypeVar("T")


# Typed structures ---------------------------------------------------------------

class ModelDocument(TypedDict):
    """
    Persisted model layout.

    Example (legacy key format, no "key_format" field):
      {
        "order": 2,
        "transitions": {
          "[A]": {"B": 3, "C": 1},
          "[A, B]": {"C": 2}
        }
      }
    """
    order: int
    transitions: Dict[str, Dict[str, int]]
    key_format: NotRequired[str]


# Protocols ----------------------------------------------------------------------

@runtime_checkable
class TokenCodec(Protocol[T]):
    """Converts tokens to their persisted text and back."""

    name: str

    def encode(self, token: T) -> str:
        ...

    def decode(self, text: str) -> T:
        """Rebuild a token from text. Raise TokenDecodeError when it is not valid."""
        ...


@runtime_checkable
class DocumentStore(Protocol):
    """
    Structured document read/write service used for persistence.

    write() creates or overwrites the document at path; read_tree() parses it
    back into dicts/lists/scalars with object keys in stored order.
    """

    def write(self, path: str, document: Dict[str, Any]) -> None:
        ...

    def read_tree(self, path: str) -> Any:
        ...
