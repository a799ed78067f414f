import logging
import re
from pathlib import Path
from typing import Dict, Set

logger = logging.getLogger(__name__)

MESSAGES: Dict[str, Dict[str, str]] = {}
AVAILABLE_LANGS: Set[str] = set()

DEFAULT_LANG = "th"
MESSAGES_PATH = Path(__file__).with_name("messages.txt")

LINE_RE = re.compile(r'^(\w+):([^|]+)\|\s*"(.*)"$')


def load_messages(path: str | Path):
    MESSAGES.clear()
    AVAILABLE_LANGS.clear()

    path = Path(path)
    if not path.exists():
        raise RuntimeError(f"messages file not found: {path}")

    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue

        m = LINE_RE.match(line)
        if not m:
            logger.warning("Skipping malformed message line: %r", line)
            continue

        lang, key, text = m.groups()
        text = text.replace("\\n", "\n").strip()

        MESSAGES.setdefault(lang, {})[key.strip()] = text
        AVAILABLE_LANGS.add(lang)


def t(key: str, lang: str | None = None, *args) -> str:
    if not lang or lang not in AVAILABLE_LANGS:
        lang = DEFAULT_LANG

    text = (
        MESSAGES.get(lang, {}).get(key)
        or MESSAGES.get(DEFAULT_LANG, {}).get(key)
        or key
    )

    if args:
        try:
            return text % args
        except (TypeError, ValueError):
            return text

    return text


load_messages(MESSAGES_PATH)
