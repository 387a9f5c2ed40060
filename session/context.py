import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from modes.registry import Mode, apply_mode
from session.exchange import Exchange
from session.validation import FormMessage, is_blank, validate_submission

logger = logging.getLogger(__name__)


class Navigation(Enum):
    # re-render the current view
    STAY = "stay"
    # drop this session and open a fresh view
    NEW_SESSION = "new_session"


@dataclass(frozen=True)
class ProcessOutcome:
    navigation: Navigation
    messages: List[FormMessage] = field(default_factory=list)
    exchange: Optional[Exchange] = None

    @property
    def ok(self) -> bool:
        return not self.messages


class ChatSession:
    """
    Conversation-scoped state.
    Lives as long as the view that created it; the host owns creation
    and disposal.
    """

    def __init__(self, role=None):
        # Selected mode name, as submitted by the view
        self.role = role
        self.role_locked = False

        # Input buffer, cleared after each processed question
        self.pending_question = ""

        # Mirrors of the last history entry
        self.last_response = ""
        self.last_key = None

        self.history: List[Exchange] = []

    # -------------------------------------------------
    # Role
    # -------------------------------------------------

    def select_role(self, value):
        if self.role_locked:
            logger.info("Role is locked, ignoring new selection")
            return
        self.role = value

    def lock_role(self):
        if not is_blank(self.role):
            self.role_locked = True

    def is_key_producing_mode(self) -> bool:
        return not is_blank(self.role) and Mode.from_role(self.role).produces_key

    # -------------------------------------------------
    # Events
    # -------------------------------------------------

    def process(self, role, question) -> ProcessOutcome:
        """
        Handle a submit event.

        - a locked role wins over the submitted one
        - validation failures return messages and leave the session untouched
        - on success the role is kept, the exchange is appended and the input
          is cleared
        """
        if self.role_locked:
            role = self.role

        messages = validate_submission(role, question)
        if messages:
            logger.info(f"Submit rejected: {[m.field for m in messages if m.field]}")
            return ProcessOutcome(Navigation.STAY, messages)

        self.role = role

        mode = Mode.from_role(role)
        response, key = apply_mode(mode, question)

        exchange = Exchange(question=question, response=response, key=key)
        self.history.append(exchange)
        self._sync_last()
        self.pending_question = ""

        logger.info(f"Processed question with mode {mode.value!r}, history size {len(self.history)}")
        return ProcessOutcome(Navigation.STAY, exchange=exchange)

    def delete_last(self) -> Navigation:
        if self.history:
            self.history.pop()
            self._sync_last()
            logger.info(f"Deleted last exchange, history size {len(self.history)}")
        return Navigation.STAY

    def reset(self) -> Navigation:
        # state is discarded by the host when it opens the new view
        return Navigation.NEW_SESSION

    # -------------------------------------------------
    # Rendering
    # -------------------------------------------------

    def render_history(self) -> str:
        parts = []
        for i, exchange in enumerate(self.history, start=1):
            for line in exchange.to_lines(i):
                parts.append(line + "\n")
            parts.append("\n")
        return "".join(parts)

    @property
    def history_text(self) -> str:
        return self.render_history()

    def to_dict(self):
        return {
            "role": self.role,
            "role_locked": self.role_locked,
            "question": self.pending_question,
            "response": self.last_response,
            "key": self.last_key,
            "key_producing_mode": self.is_key_producing_mode(),
            "history": [e.to_dict() for e in self.history],
        }

    def _sync_last(self):
        if self.history:
            last = self.history[-1]
            self.last_response = last.response
            self.last_key = last.key
        else:
            self.last_response = ""
            self.last_key = None
