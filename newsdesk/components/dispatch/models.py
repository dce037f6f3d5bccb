"""Newsletter dispatch models."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class PublishInput:
    """A newsletter issue as submitted by the operator."""

    title: str
    text_content: str
    html_content: str
