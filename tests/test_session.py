import base64

import pytest

from modes.registry import ENCRYPTOR_LABEL
from session.context import ChatSession, Navigation
from session.exchange import Exchange
from session.validation import MessageScope, validate_submission


# -------------------------------------------------
# Role
# -------------------------------------------------

def test_lock_role_requires_a_role(chat):
    chat.lock_role()
    assert chat.role_locked is False

    chat.role = "   "
    chat.lock_role()
    assert chat.role_locked is False

    chat.select_role("rot13")
    chat.lock_role()
    assert chat.role_locked is True


def test_locked_role_ignores_new_selection(chat):
    chat.select_role("rot13")
    chat.lock_role()
    chat.select_role("chiffreur")
    assert chat.role == "rot13"


def test_key_producing_mode_follows_role(chat):
    assert chat.is_key_producing_mode() is False
    chat.select_role("CHIFFREUR")
    assert chat.is_key_producing_mode() is True
    chat.select_role("rot13")
    assert chat.is_key_producing_mode() is False


# -------------------------------------------------
# process
# -------------------------------------------------

def test_rot13_scenario(chat):
    outcome = chat.process("rot13", "Hello")

    assert outcome.ok
    assert outcome.navigation is Navigation.STAY
    assert chat.last_response == "ROT13: Uryyb"
    assert chat.last_key is None
    assert chat.history == [Exchange("Hello", "ROT13: Uryyb", None)]


def test_tour_guide_scenario(chat):
    chat.process("guide touristique", "paris")
    assert chat.last_response == "Guide: PARIS"


def test_translator_and_assistant(chat):
    chat.process("Traducteur Français-Anglais", "bonjour")
    assert chat.last_response == "Traduction (EN): bonjour"
    chat.process("anything", "Hello World")
    assert chat.last_response == "Assistant: hELLO wORLD"


def test_encryptor_scenario(chat):
    outcome = chat.process("chiffreur", "AB")

    assert outcome.ok
    assert chat.last_response.startswith(ENCRYPTOR_LABEL)
    cipher = base64.b64decode(chat.last_response.splitlines()[-1])
    key = base64.b64decode(chat.last_key)
    assert len(cipher) == 2
    assert len(key) == 2
    assert bytes(c ^ k for c, k in zip(cipher, key)) == bytes([0x41, 0x42])
    assert chat.last_key not in chat.last_response
    assert outcome.exchange.key == chat.last_key


@pytest.mark.parametrize("question", ["Bonjour à tous", "日本語", "x"])
def test_encryptor_key_length_matches_utf8_length(chat, question):
    chat.process("chiffreur", question)
    key = base64.b64decode(chat.last_key)
    cipher = base64.b64decode(chat.last_response.splitlines()[-1])
    assert len(key) == len(question.encode("utf-8"))
    assert bytes(c ^ k for c, k in zip(cipher, key)).decode("utf-8") == question


def test_success_clears_input_and_grows_history(chat):
    chat.pending_question = "draft"
    chat.process("rot13", "abc")
    assert chat.pending_question == ""
    assert len(chat.history) == 1
    chat.process("rot13", "def")
    assert len(chat.history) == 2


def test_blank_role_is_rejected(chat):
    chat.pending_question = "x"
    outcome = chat.process("", "x")

    assert not outcome.ok
    assert outcome.navigation is Navigation.STAY
    assert chat.history == []
    assert chat.role is None
    assert chat.pending_question == "x"
    assert [m.scope for m in outcome.messages] == [MessageScope.GLOBAL, MessageScope.FIELD]
    assert outcome.messages[1].field == "role"


def test_blank_question_is_rejected_without_touching_history(chat):
    chat.process("rot13", "first")
    chat.pending_question = "   "
    outcome = chat.process("rot13", "   ")

    assert len(outcome.messages) == 2
    assert outcome.messages[0].scope is MessageScope.GLOBAL
    assert outcome.messages[1].field == "question"
    assert len(chat.history) == 1
    assert chat.last_response == "ROT13: svefg"
    assert chat.pending_question == "   "


def test_locked_role_is_used_over_the_submitted_one(chat):
    chat.select_role("chiffreur")
    chat.lock_role()

    outcome = chat.process("", "AB")
    assert outcome.ok
    assert chat.role == "chiffreur"
    assert chat.role_locked is True
    assert chat.last_key is not None

    chat.process("rot13", "Hello")
    assert chat.role == "chiffreur"
    assert chat.history[-1].key is not None


def test_rejected_submit_leaves_role_untouched(chat):
    chat.select_role("rot13")
    outcome = chat.process("", "x")
    assert not outcome.ok
    assert chat.role == "rot13"

    outcome = chat.process("chiffreur", "")
    assert not outcome.ok
    assert chat.role == "rot13"
    assert chat.pending_question == ""


def test_validation_reports_role_before_question():
    messages = validate_submission(None, None)
    assert [m.field for m in messages] == [None, "role"]
    assert [m.category for m in messages] == ["error", "error:role"]


# -------------------------------------------------
# delete_last / reset
# -------------------------------------------------

def test_delete_last_on_empty_history_is_a_noop(chat):
    assert chat.delete_last() is Navigation.STAY
    assert chat.history == []
    assert chat.last_response == ""
    assert chat.last_key is None


def test_delete_last_restores_previous_exchange(chat):
    chat.process("chiffreur", "secret")
    key = chat.last_key
    chat.process("rot13", "Hello")

    chat.delete_last()
    assert len(chat.history) == 1
    assert chat.last_key == key
    assert chat.last_response.startswith(ENCRYPTOR_LABEL)

    chat.delete_last()
    assert chat.history == []
    assert chat.last_response == ""
    assert chat.last_key is None


def test_reset_asks_for_a_new_session(chat):
    chat.process("rot13", "Hello")
    assert chat.reset() is Navigation.NEW_SESSION
    # state is dropped by the host, not here
    assert len(chat.history) == 1


# -------------------------------------------------
# render_history
# -------------------------------------------------

def test_render_history_empty(chat):
    assert chat.render_history() == ""


def test_render_history_format(chat, fixed_key):
    chat.process("rot13", "Hello")
    chat.process("chiffreur", "AB")

    assert chat.render_history() == (
        "Q1: Hello\n"
        "R1: ROT13: Uryyb\n"
        "\n"
        "Q2: AB\n"
        f"R2: {ENCRYPTOR_LABEL}QEA=\n"
        "Key(Base64): AQI=\n"
        "\n"
    )
    assert chat.history_text == chat.render_history()


def test_sessions_do_not_share_history():
    first, second = ChatSession(), ChatSession()
    first.process("rot13", "Hello")
    assert second.history == []
