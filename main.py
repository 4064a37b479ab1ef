import logging
import os
import sys
from pathlib import Path

from PySide6.QtCore import QStandardPaths
from PySide6.QtWidgets import QApplication

ROOT = Path(__file__).resolve().parent
SRC_DIR = ROOT / "src"

if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from core.config import AppConfig, load_config
from core.deezer_client import DeezerClient
from core.lrclib_client import LrcLibClient
from core.lyrics_engine import LyricsEngine
from core.state import AppState, Notify
from library.local_library import LocalLibrary
from player.player import Player
from player.queue import QueueController
from storage.store import KEY_VOLUME, JsonStore
from ui.main_window import MainWindow

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger("retroplayer")


def get_app_data_dir(config: AppConfig) -> str:
    base = config.data_dir or QStandardPaths.writableLocation(QStandardPaths.AppDataLocation)
    os.makedirs(base, exist_ok=True)
    return base


def init_app_state(config: AppConfig) -> AppState:
    app_state = AppState(config)

    app_state.app_data_dir = get_app_data_dir(config)
    app_state.store = JsonStore.open(os.path.join(app_state.app_data_dir, "store.sqlite3"))
    if app_state.store.db is None:
        app_state.queued_notifications.append(
            Notify(message="Storage unavailable; queue will not be saved.", notify_type="warn")
        )

    try:
        volume = float(app_state.store.get(KEY_VOLUME, 1.0))
    except (TypeError, ValueError):
        volume = 1.0
    app_state.player = Player(volume=volume)

    app_state.search_client = DeezerClient(
        base_url=config.deezer_base_url, user_agent=config.user_agent, timeout=config.request_timeout_s
    )
    lrclib = LrcLibClient(
        base_url=config.lrclib_instance, user_agent=config.user_agent, timeout=config.request_timeout_s
    )
    app_state.lyrics = LyricsEngine(lrclib, discard_stale=config.discard_stale_lyrics)
    app_state.queue = QueueController(
        app_state.player, app_state.store, restart_threshold_s=config.restart_threshold_s
    )
    app_state.library = LocalLibrary(app_state.store)

    # media events -> controller / lyrics
    app_state.player.ended.connect(app_state.queue.on_media_ended)
    app_state.player.positionChanged.connect(app_state.lyrics.on_player_position)
    app_state.queue.trackChanged.connect(app_state.lyrics.load_lyrics_for)

    return app_state


def main() -> int:
    config = load_config()
    logging.basicConfig(
        level=getattr(logging, config.log_level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )

    qt_app = QApplication(sys.argv)
    qt_app.setApplicationName("RetroPlayer")

    app_state = init_app_state(config)
    main_window = MainWindow(app_state)
    main_window.show()

    app_state.queue.resume()
    logger.info("Restored %d queued track(s)", len(app_state.queue))

    code = qt_app.exec()
    app_state.store.close()
    return code


if __name__ == "__main__":
    raise SystemExit(main())
