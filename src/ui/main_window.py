from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout, QLabel, QLineEdit,
    QPushButton, QTabWidget, QSplitter, QFileDialog
)
from PySide6.QtCore import Qt
from PySide6.QtGui import QShortcut, QKeySequence

from library.local_files import AUDIO_FILE_FILTER
from storage.store import KEY_VOLUME
from ui.lyrics_view import LyricsView
from ui.player_bar import PlayerBar
from ui.widgets.queue_list_widget import QueueListWidget
from ui.widgets.track_list_widget import TrackListWidget
from ui.workers.search_worker import SearchWorker


class MainWindow(QMainWindow):
    def __init__(self, app_state):
        super().__init__()
        self.setWindowTitle("Retro Player")
        self.resize(1100, 680)
        self.app_state = app_state

        self.player = app_state.player
        self.queue = app_state.queue
        self.lyrics = app_state.lyrics
        self.library = app_state.library
        self._search_worker = None

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        # --- search bar ---
        top_bar = QHBoxLayout()
        self.search_box = QLineEdit()
        self.search_box.setPlaceholderText("Search Deezer… (/)")
        self.search_box.returnPressed.connect(self.run_search)
        top_bar.addWidget(self.search_box, stretch=1)

        self.btn_search = QPushButton("Search")
        self.btn_search.clicked.connect(self.run_search)
        top_bar.addWidget(self.btn_search)

        self.btn_clear_search = QPushButton("Clear")
        self.btn_clear_search.clicked.connect(self._clear_search)
        top_bar.addWidget(self.btn_clear_search)
        self.layout.addLayout(top_bar)

        splitter = QSplitter(Qt.Orientation.Horizontal)

        # --- left: search results / local library ---
        self.tabs = QTabWidget()
        self.results = TrackListWidget()
        self.results.queueTrack.connect(lambda t: self.queue.append(t))
        self.results.playTrack.connect(lambda t: self.queue.append(t, play_immediately=True))
        self.tabs.addTab(self.results, "Search")

        library_tab = QWidget()
        library_layout = QVBoxLayout(library_tab)
        library_layout.setContentsMargins(0, 0, 0, 0)
        lib_buttons = QHBoxLayout()
        self.btn_add_local = QPushButton("Add files…")
        self.btn_add_local.clicked.connect(self._add_local_files)
        self.btn_clear_library = QPushButton("Clear library")
        self.btn_clear_library.clicked.connect(self.library.clear)
        lib_buttons.addWidget(self.btn_add_local)
        lib_buttons.addWidget(self.btn_clear_library)
        lib_buttons.addStretch(1)
        library_layout.addLayout(lib_buttons)

        self.library_list = TrackListWidget()
        self.library_list.queueTrack.connect(lambda t: self.queue.append(t))
        self.library_list.playTrack.connect(lambda t: self.queue.append(t, play_immediately=True))
        library_layout.addWidget(self.library_list)
        self.tabs.addTab(library_tab, "Library")
        splitter.addWidget(self.tabs)

        # --- middle: queue ---
        queue_panel = QWidget()
        queue_layout = QVBoxLayout(queue_panel)
        queue_layout.setContentsMargins(0, 0, 0, 0)
        queue_header = QHBoxLayout()
        queue_header.addWidget(QLabel("Queue"), 1)
        self.btn_clear_queue = QPushButton("Clear")
        self.btn_clear_queue.clicked.connect(self.queue.clear)
        queue_header.addWidget(self.btn_clear_queue)
        queue_layout.addLayout(queue_header)

        self.queue_view = QueueListWidget(self.queue)
        self.queue_view.playIndex.connect(self.queue.load_at)
        self.queue_view.removeIndex.connect(self.queue.remove_at)
        self.queue_view.reorderRequested.connect(self.queue.reorder)
        queue_layout.addWidget(self.queue_view)
        splitter.addWidget(queue_panel)

        # --- right: lyrics ---
        self.lyrics_view = LyricsView()
        self.lyrics_view.refreshRequested.connect(lambda: self.lyrics.refresh(self.queue.current_track))
        self.lyrics.documentChanged.connect(self.lyrics_view.set_document)
        self.lyrics.statusChanged.connect(self.lyrics_view.set_status)
        self.lyrics.activeLineChanged.connect(self.lyrics_view.set_active_line)
        splitter.addWidget(self.lyrics_view)

        splitter.setStretchFactor(0, 3)
        splitter.setStretchFactor(1, 2)
        splitter.setStretchFactor(2, 3)
        self.layout.addWidget(splitter, 1)

        # --- player bar ---
        self.player_bar = PlayerBar(self.player, self)
        self.player_bar.prevClicked.connect(self.queue.previous)
        self.player_bar.nextClicked.connect(self.queue.advance)
        self.player_bar.shuffleClicked.connect(self.queue.toggle_shuffle)
        self.player_bar.repeatClicked.connect(self.queue.toggle_repeat)
        self.player_bar.volumeChanged.connect(lambda v: self.app_state.store.set(KEY_VOLUME, v))
        self.player_bar.set_modes(self.queue.shuffle, self.queue.repeat)
        self.layout.addWidget(self.player_bar)

        # --- controller wiring ---
        self.queue.trackChanged.connect(self._on_track_changed)
        self.queue.modesChanged.connect(self.player_bar.set_modes)
        self.library.changed.connect(self._refresh_library)
        self.player.errorOccurred.connect(lambda msg: self.app_state.notify(f"Playback error: {msg}", "error"))
        self.app_state.notification.connect(self._on_notify)

        # --- shortcuts ---
        QShortcut(QKeySequence("Space"), self, activated=self.queue.toggle_play)
        QShortcut(QKeySequence("K"), self, activated=self.queue.previous)
        QShortcut(QKeySequence("L"), self, activated=self.queue.advance)
        QShortcut(QKeySequence("M"), self, activated=self.player.toggle_muted)
        QShortcut(QKeySequence("S"), self, activated=self.queue.toggle_shuffle)
        QShortcut(QKeySequence("R"), self, activated=self.queue.toggle_repeat)
        QShortcut(QKeySequence("/"), self, activated=self.search_box.setFocus)

        self._refresh_library()
        self.show_queued_notifications()

    # ------------------ search ------------------
    def run_search(self):
        query = self.search_box.text().strip()
        self.results.set_tracks([])
        if not query:
            return
        if self._search_worker is not None and self._search_worker.isRunning():
            return

        self.statusBar().showMessage("Searching Deezer…")
        self.btn_search.setEnabled(False)
        self._search_worker = SearchWorker(
            self.app_state.search_client, query, limit=self.app_state.config.search_limit
        )
        self._search_worker.resultsReady.connect(self._on_search_results)
        self._search_worker.start()

    def _on_search_results(self, ok: bool, msg: str, tracks):
        self.btn_search.setEnabled(True)
        self.results.set_tracks(tracks)
        self.tabs.setCurrentWidget(self.results)
        if ok:
            self.statusBar().showMessage(msg, 4000)
        else:
            self.app_state.notify(msg, "error")

    def _clear_search(self):
        self.results.set_tracks([])
        self.search_box.clear()
        self.search_box.setFocus()

    # ------------------ library ------------------
    def _add_local_files(self):
        paths, _ = QFileDialog.getOpenFileNames(self, "Add local files", "", AUDIO_FILE_FILTER)
        if not paths:
            return
        added = self.library.add_paths(paths)
        if len(added) < len(paths):
            self.app_state.notify(f"Skipped {len(paths) - len(added)} unreadable file(s).", "warn")

    def _refresh_library(self):
        self.library_list.set_tracks(self.library.items)

    # ------------------ player ------------------
    def _on_track_changed(self, track):
        self.player_bar.set_now_playing(track)
        if track is None:
            self.setWindowTitle("Retro Player")
            self.lyrics_view.set_track_title("Lyrics")
        else:
            self.setWindowTitle(f"{track.display_title} • Retro Player")
            self.lyrics_view.set_track_title(f"{track.display_artist} — {track.display_title}")

    # ------------------ notifications ------------------
    def _on_notify(self, n):
        msg = getattr(n, "message", "") or ""
        if not msg:
            return
        self.statusBar().showMessage(msg, 4000)

    def show_queued_notifications(self):
        for n in self.app_state.queued_notifications:
            self._on_notify(n)
        self.app_state.queued_notifications.clear()
