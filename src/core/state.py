from __future__ import annotations
from dataclasses import dataclass
from PySide6.QtCore import QObject, Signal, Slot

from core.config import AppConfig

@dataclass(frozen=True)
class Notify:
    message: str
    notify_type: str = "info"   # info/success/warn/error

class AppState(QObject):
    notification = Signal(object)   # emits Notify

    def __init__(self, config: AppConfig | None = None):
        super().__init__()
        self.config = config or AppConfig()
        self.app_data_dir: str | None = None
        self.store = None
        self.player = None
        self.queue = None
        self.lyrics = None
        self.library = None
        self.search_client = None
        self.queued_notifications: list[Notify] = []

    @Slot(str, str)
    def notify(self, message: str, notify_type: str = "info"):
        self.notification.emit(Notify(message=message, notify_type=notify_type))
