# markov_chain_model/core/errors.py
"""
Exception hierarchy for the Markov chain model.

Every error raised on purpose by the package derives from MarkovModelError, so
callers (the CLI, a service wrapper) can catch one type. The concrete classes
also derive from the closest builtin so generic handlers keep working:
 - decode problems are ValueErrors
 - encode problems (wrong token type) are TypeErrors
 - store problems are OSErrors
"""

from __future__ import annotations

from typing import Optional


class MarkovModelError(Exception):
    """Base class for all markov_chain_model errors."""


# Decoding ----------------------------------------------------------------------
class ModelDecodeError(MarkovModelError, ValueError):
    """A persisted document could not be turned back into a transition table."""


class MalformedDocumentError(ModelDecodeError):
    """Document structure is wrong (missing fields, wrong types, bad counts, bad JSON)."""


class ContextKeyError(ModelDecodeError):
    """A context key does not parse into a valid context."""

    def __init__(self, key: str, reason: str):
        super().__init__(f"bad context key {key!r}: {reason}")
        self.key = key
        self.reason = reason


class TokenDecodeError(ModelDecodeError):
    """A token fragment could not be converted by the token codec."""

    def __init__(self, text: str, codec_name: str, reason: str = ""):
        msg = f"cannot decode token {text!r} with codec '{codec_name}'"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)
        self.text = text
        self.codec_name = codec_name


class TokenCodecMissingError(ModelDecodeError):
    """Load attempted on a model that has no token codec to rebuild tokens with."""


# Encoding ----------------------------------------------------------------------
class TokenEncodeError(MarkovModelError, TypeError):
    """A token is not of the type the configured codec writes."""


# Storage -----------------------------------------------------------------------
class ModelStoreError(MarkovModelError, OSError):
    """Reading or writing a model document failed at the file system level."""

    def __init__(self, path: str, action: str, cause: Optional[BaseException] = None):
        msg = f"{action} failed for '{path}'"
        if cause is not None:
            msg += f": {cause}"
        super().__init__(msg)
        self.path = path
        self.action = action


# Configuration -----------------------------------------------------------------
class ConfigError(MarkovModelError, KeyError):
    """Unknown configuration option or a value that cannot be cast."""

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0]) if self.args else ""
