import json, logging, os, time
from pathlib import Path

from errors import CompletionError, UnexpectedShapeError

log = logging.getLogger(__name__)

OPTION_LABELS = "ABCD"


def parse_content(content):
    """Message content arrives as a JSON string, or already decoded by the SDK."""
    if isinstance(content, str):
        try:
            return json.loads(content)
        except json.JSONDecodeError as e:
            raise CompletionError(f"Model returned invalid JSON: {e}") from e
    return content


def extract_questions(result):
    # {"questions": [...]} first, then a bare array
    if isinstance(result, dict) and isinstance(result.get("questions"), list):
        return result["questions"]
    if isinstance(result, list):
        return result
    raise UnexpectedShapeError("Unexpected JSON shape from model")


def validate_mcq(q) -> str | None:
    if not isinstance(q, dict):
        return "question is not an object"
    if not isinstance(q.get("question"), str) or not q["question"].strip():
        return "missing/invalid question"
    options = q.get("options")
    if not isinstance(options, list) or len(options) != len(OPTION_LABELS):
        return "options must be a list of exactly 4 items"
    answer = q.get("correctAnswer")
    if isinstance(answer, bool) or not isinstance(answer, int) or not (0 <= answer < len(options)):
        return "correctAnswer must be an int in [0..3]"
    return None


def upload_path(uploads_dir: Path) -> Path:
    uploads_dir.mkdir(parents=True, exist_ok=True)
    return uploads_dir / f"{time.time_ns()}.pdf"


def open_upload(uploads_dir: Path):
    """Create a fresh upload file, never reusing a name another request holds."""
    while True:
        dest = upload_path(uploads_dir)
        try:
            return dest, open(dest, "xb")
        except FileExistsError:
            continue


def safe_unlink(p):
    if not p:
        return
    try:
        if os.path.exists(p):
            os.unlink(p)
    except OSError as e:
        log.error("unlink error for %s: %s", p, e)
