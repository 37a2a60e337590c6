# markov_chain_model/core/token_codec.py
"""
Token codecs: how a token of type T is written as text and read back.

A model is only loadable when it was given a codec. There is deliberately no
generic "cast the text to T" fallback: each token type needs its own parser.
"""

from __future__ import annotations

from typing import Callable, Dict, Generic

from markov_chain_model.core.errors import TokenDecodeError, TokenEncodeError
from markov_chain_model.core.protocols import T, TokenCodec


class StrTokenCodec:
    """Text tokens, stored verbatim."""

    name = "str"

    def encode(self, token: str) -> str:
        if not isinstance(token, str):
            raise TokenEncodeError(
                f"codec 'str' expects text tokens, got {type(token).__name__}: {token!r}"
            )
        return token

    def decode(self, text: str) -> str:
        return text


class IntTokenCodec:
    """Integer tokens (e.g. token ids), stored as canonical decimal text."""

    name = "int"

    def encode(self, token: int) -> str:
        if isinstance(token, bool) or not isinstance(token, int):
            raise TokenEncodeError(
                f"codec 'int' expects int tokens, got {type(token).__name__}: {token!r}"
            )
        return str(token)

    def decode(self, text: str) -> int:
        try:
            value = int(text)
        except ValueError:
            raise TokenDecodeError(text, self.name, "not an integer") from None
        # reject " 7", "+7", "007" so the round trip stays exact
        if str(value) != text:
            raise TokenDecodeError(text, self.name, "not in canonical form")
        return value


class CallableTokenCodec(Generic[T]):
    """Codec built from two caller functions, for custom token types."""

    def __init__(self, name: str, encode: Callable[[T], str], decode: Callable[[str], T]):
        self.name = name
        self._encode = encode
        self._decode = decode

    def encode(self, token: T) -> str:
        text = self._encode(token)
        if not isinstance(text, str):
            raise TokenEncodeError(f"codec '{self.name}' produced {type(text).__name__}, not text")
        return text

    def decode(self, text: str) -> T:
        try:
            return self._decode(text)
        except TokenDecodeError:
            raise
        except Exception as e:
            raise TokenDecodeError(text, self.name, str(e)) from e


# Registry -----------------------------------------------------------------------
_CODECS: Dict[str, TokenCodec] = {
    "str": StrTokenCodec(),
    "int": IntTokenCodec(),
}


def register_token_codec(codec: TokenCodec) -> None:
    """Make a codec available by name (used by the config's token_type)."""
    _CODECS[codec.name] = codec


def get_token_codec(name: str) -> TokenCodec:
    try:
        return _CODECS[name]
    except KeyError:
        raise KeyError(f"unknown token codec '{name}' (known: {', '.join(sorted(_CODECS))})") from None
