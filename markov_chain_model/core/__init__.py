"""
markov_chain_model.core

The model itself:
 - MarkovModel: transition table, training and backoff prediction
 - persistence codec (document encode/decode, SaveResult)
 - context key formats and token codecs
 - SharedMarkovModel for one instance used from many threads
"""

from .errors import (
    ConfigError,
    ContextKeyError,
    MalformedDocumentError,
    MarkovModelError,
    ModelDecodeError,
    ModelStoreError,
    TokenCodecMissingError,
    TokenDecodeError,
    TokenEncodeError,
)
from .context_keys import KEY_FORMAT_JSON, KEY_FORMAT_LEGACY
from .token_codec import (
    CallableTokenCodec,
    IntTokenCodec,
    StrTokenCodec,
    get_token_codec,
    register_token_codec,
)
from .persistence import SaveResult, decode_document, encode_document
from .markov_model import MarkovModel
from .shared_model import ReadWriteLock, SharedMarkovModel

__all__ = [
    "MarkovModel",
    "SharedMarkovModel",
    "ReadWriteLock",
    "SaveResult",
    "encode_document",
    "decode_document",
    "KEY_FORMAT_JSON",
    "KEY_FORMAT_LEGACY",
    "StrTokenCodec",
    "IntTokenCodec",
    "CallableTokenCodec",
    "get_token_codec",
    "register_token_codec",
    "MarkovModelError",
    "ModelDecodeError",
    "MalformedDocumentError",
    "ContextKeyError",
    "TokenDecodeError",
    "TokenCodecMissingError",
    "TokenEncodeError",
    "ModelStoreError",
    "ConfigError",
]
