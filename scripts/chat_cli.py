"""
Terminal harness for the role chat.
Plain lines are questions; lines starting with ':' are commands.
"""
import argparse
import logging

from modes.registry import mode_choices
from modes.transforms import decrypt
from session.context import ChatSession, Navigation

logger = logging.getLogger(__name__)

HELP = """Commands:
  :role <name>          choose the role ({roles})
  :lock                 lock the current role
  :delete               delete the last exchange
  :history              print the history
  :new                  start a new chat
  :decrypt <c> <k>      decrypt a chiffreur response with its key
  :quit                 leave"""


def format_outcome(ctx, outcome):
    if not outcome.ok:
        return "\n".join(f"! {m.text}" for m in outcome.messages)
    lines = [ctx.last_response]
    if ctx.last_key is not None:
        lines.append(f"Key(Base64): {ctx.last_key}")
    return "\n".join(lines)


def handle_line(ctx, line):
    """
    Apply one input line to the session.
    Returns (ctx, output); `ctx` is a new session after ':new'.
    """
    text = line.strip()

    if not text.startswith(":"):
        outcome = ctx.process(ctx.role, text)
        return ctx, format_outcome(ctx, outcome)

    command, _, arg = text.partition(" ")
    arg = arg.strip()

    if command == ":role":
        ctx.select_role(arg)
        return ctx, f"Role: {ctx.role or '-'}"

    if command == ":lock":
        ctx.lock_role()
        return ctx, "Role locked." if ctx.role_locked else "Choose a role first."

    if command == ":delete":
        ctx.delete_last()
        return ctx, ctx.last_response or "(history is empty)"

    if command == ":history":
        return ctx, ctx.render_history().rstrip("\n") or "(history is empty)"

    if command == ":new":
        if ctx.reset() is Navigation.NEW_SESSION:
            ctx = ChatSession()
        return ctx, "New chat."

    if command == ":decrypt":
        parts = arg.split()
        if len(parts) != 2:
            return ctx, "Usage: :decrypt <cipher_b64> <key_b64>"
        try:
            return ctx, decrypt(parts[0], parts[1])
        except ValueError as e:
            return ctx, f"Cannot decrypt: {e}"

    if command == ":help":
        return ctx, HELP.format(roles=", ".join(value for value, _ in mode_choices()))

    return ctx, f"Unknown command {command}, try :help"


def build_parser():
    parser = argparse.ArgumentParser(prog="role-chat")
    parser.add_argument("--role", help="Role to start with.")
    parser.add_argument("--lock", action="store_true", help="Lock the starting role.")
    return parser


def main(argv=None):
    logging.basicConfig(level=logging.WARNING)
    args = build_parser().parse_args(argv)

    ctx = ChatSession(role=args.role)
    if args.lock:
        ctx.lock_role()

    print("Role chat. Type :help for commands.")
    while True:
        try:
            line = input("> ")
        except EOFError:
            break
        if line.strip() == ":quit":
            break
        ctx, output = handle_line(ctx, line)
        print(output)


if __name__ == "__main__":
    main()
