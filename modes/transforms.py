# modes/transforms.py

import base64
import secrets


# -------------------------------------------------
# Text transforms
# -------------------------------------------------

def rot13(text: str) -> str:
    """
    Rotate ASCII letters by 13 positions within their case.
    Everything else (digits, accents, punctuation) is kept as is.
    """
    out = []
    for c in text:
        if "a" <= c <= "z":
            out.append(chr((ord(c) - ord("a") + 13) % 26 + ord("a")))
        elif "A" <= c <= "Z":
            out.append(chr((ord(c) - ord("A") + 13) % 26 + ord("A")))
        else:
            out.append(c)
    return "".join(out)


def invert_case(text: str) -> str:
    out = []
    for c in text:
        if c.isupper():
            swapped = c.lower()
        elif c.islower():
            swapped = c.upper()
        else:
            swapped = c
        # "ß".upper() == "SS", "ſ".upper().lower() == "s": keep characters
        # without a reversible 1:1 counterpart
        if len(swapped) == 1 and swapped.swapcase() == c:
            out.append(swapped)
        else:
            out.append(c)
    return "".join(out)


def shout(text: str) -> str:
    return text.upper()


# -------------------------------------------------
# XOR one-time pad (toy, not real encryption)
# -------------------------------------------------

def random_key(length: int) -> bytes:
    return secrets.token_bytes(length)


def xor_bytes(data: bytes, key: bytes) -> bytes:
    if len(data) != len(key):
        raise ValueError(f"key length {len(key)} does not match data length {len(data)}")
    return bytes(d ^ k for d, k in zip(data, key))


def encrypt(text: str):
    """
    XOR the UTF-8 bytes of `text` with a fresh random key of the same size.

    Returns (cipher_b64, key_b64). A new key is drawn on every call.
    """
    plain = text.encode("utf-8")
    key = random_key(len(plain))
    cipher = xor_bytes(plain, key)
    return (
        base64.b64encode(cipher).decode("ascii"),
        base64.b64encode(key).decode("ascii"),
    )


def decrypt(cipher_b64: str, key_b64: str) -> str:
    try:
        cipher = base64.b64decode(cipher_b64, validate=True)
        key = base64.b64decode(key_b64, validate=True)
    except ValueError as e:
        raise ValueError(f"Invalid Base64 input: {e}") from e
    return xor_bytes(cipher, key).decode("utf-8")
