from __future__ import annotations

import os
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# src/inbox_autolabel/config/paths.py -> repository root
PROJECT_ROOT = Path(__file__).resolve().parents[3]

# An already exported variable wins over the .env file.
load_dotenv(PROJECT_ROOT / ".env", override=False)


def env_path(env_key: str, default: str, *, root: Optional[Path] = None) -> Path:
    """
    Path from ENV, falling back to `default`; relative values hang off `root`
    (the repository root unless given). Nothing is created here: the browser
    creates its profile on launch and the results log its folder on first write.
    """
    raw = (os.getenv(env_key) or "").strip() or default
    path = Path(raw).expanduser()
    if path.is_absolute():
        return path
    return (root or PROJECT_ROOT) / path


# Chromium profile holding the Gmail login between sessions.
PROFILE_DIR = env_path("INBOX_AUTOLABEL_PROFILE_DIR", ".browser-profile")
# autolabel.jsonl lives here.
LOGS_DIR = env_path("INBOX_AUTOLABEL_LOGS_DIR", "logs")
