"""Built-in question bank used when no bank has been saved yet."""
import json
from pathlib import Path

CONTENT_DIR = Path(__file__).parent / "content"


def builtin_bank() -> list[dict]:
    """Return a fresh copy of the seed questions from questions.json."""
    data = json.loads((CONTENT_DIR / "questions.json").read_text(encoding="utf-8"))
    return data["questions"]
