from flask import Flask, flash, jsonify, redirect, render_template, request, session, url_for
from dotenv import load_dotenv
import logging
import os
import uuid
from pathlib import Path

from modes.registry import mode_choices
from session.context import ChatSession, Navigation


# -------------------------------------------------
# Setup
# -------------------------------------------------

load_dotenv()
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

ROOT_DIR = Path(__file__).resolve().parent

app = Flask(
    __name__,
    template_folder=str(ROOT_DIR / "templates"),
)
app.secret_key = os.getenv("FLASK_SECRET_KEY", "dev-secret")

SESSION_CONTEXTS = {}


def env_flag(name, default=False):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


# -------------------------------------------------
# Helpers: session context
# -------------------------------------------------

def get_session_context():
    if "session_id" not in session:
        session["session_id"] = str(uuid.uuid4())

    sid = session["session_id"]
    if sid not in SESSION_CONTEXTS:
        logger.info(f"Opening chat session {sid}")
        SESSION_CONTEXTS[sid] = ChatSession()
    return SESSION_CONTEXTS[sid]


def discard_session_context():
    sid = session.pop("session_id", None)
    if sid is not None and SESSION_CONTEXTS.pop(sid, None) is not None:
        logger.info(f"Closed chat session {sid}")


def back_to_chat():
    return redirect(url_for("index"))


# -------------------------------------------------
# Routes
# -------------------------------------------------

@app.route("/")
def index():
    ctx = get_session_context()
    return render_template(
        "index.html",
        chat=ctx,
        modes=mode_choices(),
        history_text=ctx.render_history(),
    )


@app.route("/role", methods=["POST"])
def select_role():
    ctx = get_session_context()
    ctx.select_role(request.form.get("role", ""))
    if request.form.get("lock"):
        ctx.lock_role()
    return back_to_chat()


@app.route("/role/lock", methods=["POST"])
def lock_role():
    ctx = get_session_context()
    ctx.lock_role()
    return back_to_chat()


@app.route("/send", methods=["POST"])
def send():
    ctx = get_session_context()

    role = request.form.get("role", "")
    question = request.form.get("question", "")

    # keep what was typed on the page, process clears it on success
    ctx.pending_question = question

    outcome = ctx.process(role, question)
    for message in outcome.messages:
        flash(message.text, message.category)

    return back_to_chat()


@app.route("/delete-last", methods=["POST"])
def delete_last():
    ctx = get_session_context()
    ctx.delete_last()
    return back_to_chat()


@app.route("/new-chat", methods=["POST"])
def new_chat():
    ctx = get_session_context()
    if ctx.reset() is Navigation.NEW_SESSION:
        discard_session_context()
    return back_to_chat()


@app.route("/api/session", methods=["GET"])
def get_session_snapshot():
    ctx = get_session_context()
    payload = ctx.to_dict()
    payload["history_text"] = ctx.render_history()
    return jsonify(payload)


if __name__ == "__main__":
    app.run(
        host=os.getenv("CHAT_HOST", "127.0.0.1"),
        port=int(os.getenv("CHAT_PORT", "5000")),
        debug=env_flag("CHAT_DEBUG"),
    )
