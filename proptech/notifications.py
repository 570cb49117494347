from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from structlog import get_logger

logger = get_logger()

Variant = Literal["success", "warning", "destructive", "info"]

class Toast(BaseModel):
    variant: Variant
    title: str
    description: str = ""
    items: List[str] = Field(default_factory=list)

class Notifier:
    """Collects user-facing messages for the caller to render."""

    def __init__(self):
        self.toasts: List[Toast] = []

    def notify(self, variant: Variant, title: str, description: str = "", items: Optional[List[str]] = None) -> Toast:
        toast = Toast(variant=variant, title=title, description=description, items=items or [])
        self.toasts.append(toast)
        log = logger.warning if variant in ("warning", "destructive") else logger.info
        log("Toast", variant=variant, title=title, description=description)
        return toast

    def success(self, title: str, description: str = "") -> Toast:
        return self.notify("success", title, description)

    def warning(self, title: str, description: str = "", items: Optional[List[str]] = None) -> Toast:
        return self.notify("warning", title, description, items)

    def error(self, title: str, description: str = "", items: Optional[List[str]] = None) -> Toast:
        return self.notify("destructive", title, description, items)

    def clear(self) -> None:
        self.toasts = []

    @property
    def last(self) -> Optional[Toast]:
        return self.toasts[-1] if self.toasts else None
