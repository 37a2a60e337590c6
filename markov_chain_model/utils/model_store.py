# model_store.py - JSON persistence layer for Markov model documents

# JsonDocumentStore implements the DocumentStore protocol:
# - write(path, document): create/overwrite a pretty-printed JSON file
# - read_tree(path): parse a JSON file back into dicts/lists/scalars
# I/O problems surface as ModelStoreError, broken JSON as MalformedDocumentError.
# Nothing is retried here.

import json
import logging
import os
import tempfile
from typing import Any, Dict, Optional

from markov_chain_model.core.errors import MalformedDocumentError, ModelStoreError

logger = logging.getLogger(__name__)


class JsonDocumentStore:
    """Reads and writes model documents as UTF-8 JSON files."""

    def __init__(self, indent: Optional[int] = 2):
        self.indent = indent

    def write(self, path: str, document: Dict[str, Any]) -> None:
        """
        Save document to path in JSON format, creating parent directories.
        Args:
            path (str): destination file, overwritten if it exists
            document (dict): the model document (order + transitions)
        """
        parent = os.path.dirname(path)
        try:
            if parent:
                os.makedirs(parent, exist_ok=True)
            # write a sibling temp file, then swap it in; the old file survives a failed dump
            fd, tmp = tempfile.mkstemp(prefix=".markov-", suffix=".tmp", dir=parent or ".")
        except OSError as e:
            raise ModelStoreError(path, "write", e) from e
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=self.indent, ensure_ascii=False)
            os.replace(tmp, path)
        except OSError as e:
            raise ModelStoreError(path, "write", e) from e
        finally:
            if os.path.exists(tmp):
                os.unlink(tmp)
        logger.debug("wrote %s", path)

    def read_tree(self, path: str) -> Any:
        """
        Load a JSON document from disk.
        Returns:
            the parsed document, object keys in file order
        """
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise ModelStoreError(path, "read", e) from e
        except ValueError as e:
            # JSONDecodeError and UnicodeDecodeError are both ValueErrors
            raise MalformedDocumentError(f"'{path}' is not valid JSON: {e}") from e
        logger.debug("read %s", path)
        return data
