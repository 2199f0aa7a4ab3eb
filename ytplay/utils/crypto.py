import base64
import binascii
import json
from typing import Any, Dict

from Crypto.Cipher import AES

from ytplay.core.exceptions import CryptoFailure, InvalidPadding

IV_SIZE = 16


def pkcs7_unpad(data: bytes) -> bytes:
    """Strip PKCS#7 padding, trusting only the final length byte"""
    if not data:
        raise InvalidPadding("invalid padding")
    padding = data[-1]
    if padding == 0 or padding > len(data):
        raise InvalidPadding("invalid padding")
    return data[:-padding]


def decrypt_payload(encoded: str, secret_key: str) -> Dict[str, Any]:
    """
    Decrypt a base64 AES-128-CBC payload.
    The first 16 bytes of the decoded buffer are the IV.
    """
    try:
        key = bytes.fromhex(secret_key)
    except ValueError as e:
        raise CryptoFailure(f"invalid secret key: {e}") from e

    try:
        data = base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise CryptoFailure(f"invalid base64: {e}") from e

    if len(data) <= IV_SIZE:
        raise CryptoFailure("data too short")

    iv, content = data[:IV_SIZE], data[IV_SIZE:]
    if len(content) % AES.block_size:
        raise CryptoFailure("ciphertext is not a multiple of the block size")

    cipher = AES.new(key, AES.MODE_CBC, iv)
    decrypted = pkcs7_unpad(cipher.decrypt(content))

    try:
        result = json.loads(decrypted.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise CryptoFailure(f"invalid JSON payload: {e}") from e

    if not isinstance(result, dict):
        raise CryptoFailure("decrypted payload is not an object")
    return result
