from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

# Importing paths loads .env before any INBOX_AUTOLABEL_* lookup below.
import inbox_autolabel.config.paths  # noqa: F401


DEFAULT_MARKER_PREFIX = "AutoLabelMeta_"


@dataclass(frozen=True)
class WorkflowTimings:
    """Poll, settle and timeout policies of the workflow, all in seconds."""

    # Navigation to the filter settings view.
    settings_poll_interval: float = 0.2
    settings_timeout: float = 10.0
    settings_settle: float = 1.0

    # Criteria form of the creation wizard.
    form_poll_interval: float = 0.1
    form_timeout: float = 5.0

    # Creation wizard settle delays.
    before_proceed: float = 0.3
    after_proceed: float = 0.8
    after_apply_label: float = 0.5

    # Editing an existing filter.
    after_open_rule: float = 1.0
    after_append_sender: float = 0.5
    after_update: float = 0.5

    def scaled(self, factor: float) -> "WorkflowTimings":
        # Slow machines/connections can stretch every policy at once.
        return WorkflowTimings(
            **{name: value * factor for name, value in self.__dict__.items()}
        )


@dataclass(frozen=True)
class GmailSelectors:
    """Gmail markup conventions the heuristics are tuned to."""

    email_attribute: str = "email"
    sender_display: str = ".go, .gD, .g2"
    settings_marker: str = ".Tm.aeJ, .aKh"
    filter_rows: str = "[data-filter-id]"
    form_ready: str = "label"
    links: str = 'button, a, span[role="link"], div[role="link"]'
    buttons: str = 'button, span[role="link"]'

    create_filter_texts: Tuple[str, ...] = (
        "Create a new filter",
        "Create new filter",
        "New filter",
        "Create filter",
    )
    proceed_text: str = "Create filter"
    update_text: str = "Update filter"
    cancel_text: str = "Cancel"

    from_label: str = "From"
    doesnt_have_label: str = "Doesn't have"
    apply_label_label: str = "Apply the label:"


@dataclass(frozen=True)
class AutoLabelSettings:
    gmail_url: str = "https://mail.google.com/mail/u/0/"
    # Location hash of the filter list inside Gmail settings.
    filters_location: str = "settings/filters"
    marker_prefix: str = DEFAULT_MARKER_PREFIX
    # How many ancestors the sender lookup may climb from the clicked node.
    max_ancestor_levels: int = 15
    headless: bool = False
    # Chromium channel, e.g. "chrome" or "msedge"; None uses bundled Chromium.
    browser_channel: Optional[str] = None
    timings: WorkflowTimings = field(default_factory=WorkflowTimings)
    selectors: GmailSelectors = field(default_factory=GmailSelectors)

    def marker_for(self, label_name: str) -> str:
        return f"{self.marker_prefix}{label_name}"


def _env_bool(key: str, default: bool) -> bool:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "on"}:
        return True
    if normalized in {"0", "false", "no", "off"}:
        return False
    raise RuntimeError(f"{key} must be a boolean, got {value!r}")


def _env_float(key: str, default: float) -> float:
    value = os.getenv(key)
    if value is None or not value.strip():
        return default
    try:
        parsed = float(value)
    except ValueError as exc:
        raise RuntimeError(f"{key} must be a number, got {value!r}") from exc
    if parsed <= 0:
        raise RuntimeError(f"{key} must be positive, got {value!r}")
    return parsed


def load_settings() -> AutoLabelSettings:
    """
    Build settings from INBOX_AUTOLABEL_* environment variables.
    Unset variables keep the defaults tuned for Gmail.
    """
    defaults = AutoLabelSettings()

    marker_prefix = os.getenv("INBOX_AUTOLABEL_MARKER_PREFIX", defaults.marker_prefix)
    if not marker_prefix.strip():
        raise RuntimeError("INBOX_AUTOLABEL_MARKER_PREFIX must not be blank.")

    channel = os.getenv("INBOX_AUTOLABEL_BROWSER_CHANNEL") or None
    timing_factor = _env_float("INBOX_AUTOLABEL_TIMING_FACTOR", 1.0)

    return replace(
        defaults,
        gmail_url=os.getenv("INBOX_AUTOLABEL_GMAIL_URL", defaults.gmail_url),
        marker_prefix=marker_prefix.strip(),
        headless=_env_bool("INBOX_AUTOLABEL_HEADLESS", defaults.headless),
        browser_channel=channel,
        timings=defaults.timings.scaled(timing_factor),
    )

