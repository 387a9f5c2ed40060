from dataclasses import dataclass
from enum import Enum
from typing import Optional


class MessageScope(Enum):
    GLOBAL = "global"
    FIELD = "field"


@dataclass(frozen=True)
class FormMessage:
    """
    One user-visible validation message.
    Global messages are not tied to a field; field messages name the
    input they belong to ("role" or "question").
    """
    scope: MessageScope
    text: str
    field: Optional[str] = None

    @property
    def category(self) -> str:
        # flash category understood by the template
        if self.scope is MessageScope.FIELD:
            return f"error:{self.field}"
        return "error"


def is_blank(value) -> bool:
    return value is None or not str(value).strip()


def validate_submission(role, question):
    """
    Validate a submit event.
    Returns a list of FormMessage (empty when the submission is valid).

    The role is checked first; a missing role stops validation so a
    failing call always reports one global and one field message.
    """
    if is_blank(role):
        return [
            FormMessage(MessageScope.GLOBAL, "Veuillez choisir le rôle de l’API."),
            FormMessage(MessageScope.FIELD, "Le rôle est obligatoire", field="role"),
        ]

    if is_blank(question):
        return [
            FormMessage(MessageScope.GLOBAL, "La question est obligatoire."),
            FormMessage(MessageScope.FIELD, "La question est obligatoire", field="question"),
        ]

    return []
