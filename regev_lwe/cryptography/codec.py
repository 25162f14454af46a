# regev_lwe/cryptography/codec.py
"""
Regev-LWE Ciphertext Codec

Transport string = base64(compact JSON of the container):

    {"blocks":[{"u":[int,...],"v":int},...],
     "meta":{"timestamp":int,"algorithm":"LWE-Regev"}}

  - JSON separators (",", ":") and the key order above
  - Standard base64 alphabet with padding, no line wrapping

Everything that fails to decode raises DecodeError with one of the stable
messages from common.py. The secret key is never part of the container.
"""

from __future__ import annotations

import base64
import binascii
import json
from typing import Any, Dict

import numpy as np

from .common import (
    ALGORITHM_TAG,
    ERR_BASE64,
    ERR_STRUCTURE,
    DecodeError,
    EncryptedBlock,
    SerializedCiphertext,
)


def _is_int(x: Any) -> bool:
    return isinstance(x, int) and not isinstance(x, bool)


def _block_from_dict(data: Any) -> EncryptedBlock:
    if not isinstance(data, dict):
        raise DecodeError(ERR_STRUCTURE)
    u, v = data.get("u"), data.get("v")
    if not isinstance(u, list) or not all(_is_int(x) for x in u) or not _is_int(v):
        raise DecodeError(ERR_STRUCTURE)
    try:
        return EncryptedBlock(u=np.array(u, dtype=np.int64), v=v)
    except OverflowError as e:
        raise DecodeError(ERR_STRUCTURE) from e


def ciphertext_from_dict(data: Any) -> SerializedCiphertext:
    """Validate a parsed container and build a SerializedCiphertext."""
    if not isinstance(data, dict) or not isinstance(data.get("blocks"), list):
        raise DecodeError(ERR_STRUCTURE)

    timestamp, algorithm = 0, ALGORITHM_TAG
    if "meta" in data:
        meta = data["meta"]
        if not isinstance(meta, dict):
            raise DecodeError(ERR_STRUCTURE)
        timestamp = meta.get("timestamp", timestamp)
        algorithm = meta.get("algorithm", algorithm)
        if not _is_int(timestamp) or not isinstance(algorithm, str):
            raise DecodeError(ERR_STRUCTURE)

    blocks = [_block_from_dict(b) for b in data["blocks"]]
    return SerializedCiphertext(blocks=blocks, timestamp=timestamp, algorithm=algorithm)


def ciphertext_to_json(container: SerializedCiphertext) -> str:
    """Serialize to compact JSON text."""
    return json.dumps(container.to_dict(), separators=(",", ":"))


def encode_ciphertext(container: SerializedCiphertext) -> str:
    """Container -> transport string."""
    text = ciphertext_to_json(container)
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def decode_ciphertext(text: str) -> SerializedCiphertext:
    """Transport string -> container. Raises DecodeError."""
    if not isinstance(text, str):
        raise DecodeError(ERR_BASE64)
    try:
        raw = base64.b64decode(text.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(ERR_BASE64) from e

    try:
        data: Dict[str, Any] = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, ValueError, RecursionError) as e:
        raise DecodeError(ERR_STRUCTURE) from e

    return ciphertext_from_dict(data)
