"""Transient alert shown above the transcript."""

from dataclasses import dataclass
from typing import Literal

BannerSeverity = Literal["info", "warning", "error"]


@dataclass(frozen=True)
class Banner:
    """A user-facing alert, cleared on the next user action."""

    text: str
    severity: BannerSeverity = "error"
