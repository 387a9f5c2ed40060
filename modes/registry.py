# modes/registry.py

import logging
from enum import Enum

from modes.transforms import encrypt, invert_case, rot13, shout

logger = logging.getLogger(__name__)


ENCRYPTOR_LABEL = "Rôle: chiffreur\nTexte chiffré (Base64):\n"


class Mode(Enum):
    """
    Closed set of processing modes.
    The value is the role string the view submits.
    """
    ASSISTANT = "assistant"
    TRANSLATOR = "traducteur français-anglais"
    TOUR_GUIDE = "guide touristique"
    ENCRYPTOR = "chiffreur"
    ROT13 = "rot13"

    @classmethod
    def from_role(cls, role):
        """
        Case-insensitive exact match on the role string.
        Unknown or missing roles fall back to the assistant.
        """
        if role:
            wanted = role.lower()
            for mode in cls:
                if mode.value == wanted:
                    return mode
        return cls.ASSISTANT

    @property
    def produces_key(self) -> bool:
        return self is Mode.ENCRYPTOR


# -------------------------------------------------
# Handlers: question -> (response, key | None)
# -------------------------------------------------

def _assistant(question):
    return "Assistant: " + invert_case(question), None


def _translator(question):
    # demo only, no translation happens
    return "Traduction (EN): " + question, None


def _tour_guide(question):
    return "Guide: " + shout(question), None


def _encryptor(question):
    cipher_b64, key_b64 = encrypt(question)
    return ENCRYPTOR_LABEL + cipher_b64, key_b64


def _rot13(question):
    return "ROT13: " + rot13(question), None


# -------------------------------------------------
# Mode registry
# -------------------------------------------------

MODES = {
    Mode.ASSISTANT: {
        "handler": _assistant,
        "label": "Assistant",
    },
    Mode.TRANSLATOR: {
        "handler": _translator,
        "label": "Traducteur Français-Anglais",
    },
    Mode.TOUR_GUIDE: {
        "handler": _tour_guide,
        "label": "Guide touristique",
    },
    Mode.ENCRYPTOR: {
        "handler": _encryptor,
        "label": "Chiffreur",
    },
    Mode.ROT13: {
        "handler": _rot13,
        "label": "ROT13",
    },
}


def apply_mode(mode: Mode, question: str):
    response, key = MODES[mode]["handler"](question)
    logger.debug(f"Applied mode {mode.value!r} (key produced: {key is not None})")
    return response, key


def mode_choices():
    """(value, label) pairs for the role selector."""
    return [(mode.value, cfg["label"]) for mode, cfg in MODES.items()]
