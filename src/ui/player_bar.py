# ui/player_bar.py
from __future__ import annotations

from PySide6.QtCore import Qt, QSize, QByteArray, Signal
from PySide6.QtGui import QIcon, QPixmap, QPainter
from PySide6.QtWidgets import QWidget, QHBoxLayout, QLabel, QToolButton, QSlider
from PySide6.QtSvg import QSvgRenderer

from core.utils import format_time


def _svg_icon(path_d: str, size: int = 20, color: str = "#e5e7eb") -> QIcon:
    svg = f"""
    <svg xmlns="http://www.w3.org/2000/svg" width="{size}" height="{size}" viewBox="0 0 24 24">
      <path d="{path_d}" fill="{color}"/>
    </svg>
    """.strip()

    renderer = QSvgRenderer(QByteArray(svg.encode("utf-8")))
    pm = QPixmap(size, size)
    pm.fill(Qt.transparent)

    p = QPainter(pm)
    renderer.render(p)
    p.end()

    return QIcon(pm)


SVG_PREV = "M6 18V6h2v12H6zm3.5-6L18 6v12l-8.5-6z"
SVG_NEXT = "M16 6v12h2V6h-2zM6 18l8.5-6L6 6v12z"
SVG_PLAY = "M8 5v14l11-7L8 5z"
SVG_PAUSE = "M6 5h4v14H6V5zm8 0h4v14h-4V5z"
SVG_SHUFFLE = "M10.6 9.2 5.4 4 4 5.4l5.2 5.2 1.4-1.4zM14.5 4l2 2L4 18.6 5.4 20 18 7.5l2 2V4h-5.5zm.3 9.4-1.4 1.4 3.1 3.1-2 2.1H20v-5.5l-2 2-3.2-3.1z"
SVG_REPEAT = "M7 7h10v3l4-4-4-4v3H5v6h2V7zm10 10H7v-3l-4 4 4 4v-3h12v-6h-2v4z"
SVG_VOLUME = "M3 9v6h4l5 5V4L7 9H3zm13.5 3A4.5 4.5 0 0 0 14 8v8a4.5 4.5 0 0 0 2.5-4z"
SVG_MUTED = "M16.5 12A4.5 4.5 0 0 0 14 8v2.2l2.5 2.5V12zM19 12c0 .9-.2 1.8-.5 2.6l1.5 1.5A8.8 8.8 0 0 0 21 12c0-4.3-3-7.9-7-8.8v2.1c2.9.9 5 3.5 5 6.7zM4.3 3 3 4.3 7.7 9H3v6h4l5 5v-6.7l4.3 4.2c-.7.5-1.4.9-2.3 1.2v2.1a8.9 8.9 0 0 0 3.7-1.8l2 2 1.3-1.3L4.3 3zM12 4 9.9 6.1 12 8.2V4z"

ACCENT = "#38bdf8"
IDLE = "#e5e7eb"


class PlayerBar(QWidget):
    prevClicked = Signal()
    nextClicked = Signal()
    shuffleClicked = Signal()
    repeatClicked = Signal()
    volumeChanged = Signal(float)   # 0..1

    def __init__(self, player, parent=None):
        super().__init__(parent)
        self.player = player

        self._dragging = False
        self._duration_ms = 0

        root = QHBoxLayout(self)
        root.setContentsMargins(8, 6, 8, 6)
        root.setSpacing(10)

        # --- buttons ---
        self.btn_shuffle = self._tool_button("BtnShuffle", SVG_SHUFFLE, "Shuffle (S)", checkable=True)
        self.btn_prev = self._tool_button("BtnPrev", SVG_PREV, "Previous (K)")
        self.btn_play = self._tool_button("BtnPlay", SVG_PLAY, "Play/Pause (Space)", size=22)
        self.btn_next = self._tool_button("BtnNext", SVG_NEXT, "Next (L)")
        self.btn_repeat = self._tool_button("BtnRepeat", SVG_REPEAT, "Repeat (R)", checkable=True)
        self.btn_mute = self._tool_button("BtnMute", SVG_VOLUME, "Mute (M)")

        # --- labels ---
        self.lbl_title = QLabel("Nothing playing")
        self.lbl_title.setMinimumWidth(220)
        self.lbl_title.setTextInteractionFlags(Qt.TextSelectableByMouse)
        self.lbl_title.setObjectName("NowPlaying")

        self.lbl_time = QLabel("0:00")
        self.lbl_dur = QLabel("0:00")

        # --- sliders ---
        self.slider = QSlider(Qt.Orientation.Horizontal)
        self.slider.setRange(0, 0)
        self.slider.setSingleStep(1000)
        self.slider.setPageStep(5000)

        self.volume = QSlider(Qt.Orientation.Horizontal)
        self.volume.setRange(0, 100)
        self.volume.setFixedWidth(90)
        self.volume.setValue(int(round(player.volume() * 100)))

        root.addWidget(self.btn_shuffle)
        root.addWidget(self.btn_prev)
        root.addWidget(self.btn_play)
        root.addWidget(self.btn_next)
        root.addWidget(self.btn_repeat)
        root.addSpacing(6)
        root.addWidget(self.lbl_title, 1)
        root.addWidget(self.lbl_time)
        root.addWidget(self.slider, 3)
        root.addWidget(self.lbl_dur)
        root.addWidget(self.btn_mute)
        root.addWidget(self.volume)

        # --- signals ---
        self.slider.sliderPressed.connect(self._on_slider_pressed)
        self.slider.sliderReleased.connect(self._on_slider_released)
        self.slider.sliderMoved.connect(self._on_slider_moved)
        self.volume.valueChanged.connect(self._on_volume_moved)

        self.btn_prev.clicked.connect(self.prevClicked.emit)
        self.btn_next.clicked.connect(self.nextClicked.emit)
        self.btn_shuffle.clicked.connect(self.shuffleClicked.emit)
        self.btn_repeat.clicked.connect(self.repeatClicked.emit)
        self.btn_play.clicked.connect(self.player.toggle_play_pause)
        self.btn_mute.clicked.connect(self.player.toggle_muted)

        self.player.statusChanged.connect(self._on_status_changed)
        self.player.positionChanged.connect(self._on_position)
        self.player.durationChanged.connect(self._on_duration)
        self.player.mutedChanged.connect(self._on_muted)

        self.setObjectName("PlayerBar")
        self._apply_styles()

    def _tool_button(self, name: str, svg: str, tip: str, size: int = 20, checkable: bool = False) -> QToolButton:
        btn = QToolButton()
        btn.setObjectName(name)
        btn.setIcon(_svg_icon(svg, size))
        btn.setIconSize(QSize(size, size))
        btn.setToolTip(tip)
        btn.setCheckable(checkable)
        return btn

    # --- external updates ---
    def set_now_playing(self, track):
        if track is not None:
            self.lbl_title.setText(f"{track.display_artist} — {track.display_title}")
        else:
            self.lbl_title.setText("Nothing playing")
            self.slider.setRange(0, 0)
            self.lbl_time.setText("0:00")
            self.lbl_dur.setText("0:00")
            self._set_playing(False)

    def set_modes(self, shuffle: bool, repeat: bool):
        self.btn_shuffle.setChecked(shuffle)
        self.btn_repeat.setChecked(repeat)
        self.btn_shuffle.setIcon(_svg_icon(SVG_SHUFFLE, 20, ACCENT if shuffle else IDLE))
        self.btn_repeat.setIcon(_svg_icon(SVG_REPEAT, 20, ACCENT if repeat else IDLE))

    # --- slider handling ---
    def _on_slider_pressed(self):
        self._dragging = True

    def _on_slider_moved(self, value: int):
        self.lbl_time.setText(format_time(value / 1000))

    def _on_slider_released(self):
        self._dragging = False
        if self._duration_ms > 0:
            self.player.seek_ms(int(self.slider.value()))

    def _on_volume_moved(self, value: int):
        v = max(0, min(100, int(value))) / 100.0
        self.player.set_volume(v)
        self.volumeChanged.emit(v)

    # --- player updates ---
    def _on_status_changed(self, status):
        name = getattr(status, "name", str(status)).lower()
        self._set_playing("play" in name)

    def _set_playing(self, playing: bool):
        if playing:
            self.btn_play.setIcon(_svg_icon(SVG_PAUSE, 22))
            self.btn_play.setToolTip("Pause")
        else:
            self.btn_play.setIcon(_svg_icon(SVG_PLAY, 22))
            self.btn_play.setToolTip("Play")

    def _on_muted(self, muted: bool):
        self.btn_mute.setIcon(_svg_icon(SVG_MUTED if muted else SVG_VOLUME, 20))

    def _on_duration(self, ms: int):
        self._duration_ms = int(ms)
        self.slider.setRange(0, max(0, int(ms)))
        self.lbl_dur.setText(format_time(int(ms) / 1000))

    def _on_position(self, ms: int):
        if self._dragging:
            return
        self.lbl_time.setText(format_time(int(ms) / 1000))
        self.slider.setValue(int(ms))

    def _apply_styles(self):
        self.setStyleSheet("""
        QWidget#PlayerBar {
            background-color: #020617;
            border-top: 1px solid #111827;
        }
        QToolButton {
            border: 1px solid transparent;
            background: transparent;
            padding: 6px;
            border-radius: 10px;
        }
        QToolButton:hover {
            background: #0b1222;
            border-color: #1f2937;
        }
        QToolButton#BtnPlay {
            background: #111827;
            border: 1px solid #1f2937;
            border-radius: 999px;
            padding: 8px;
        }
        QToolButton#BtnPlay:hover { border-color: #38bdf8; }
        QSlider::groove:horizontal {
            height: 4px;
            background: #0f172a;
            border-radius: 2px;
        }
        QSlider::handle:horizontal {
            width: 12px;
            height: 12px;
            margin: -4px 0;
            border-radius: 6px;
            background: #38bdf8;
        }
        QSlider::sub-page:horizontal {
            background: #38bdf8;
            border-radius: 2px;
        }
        QLabel { color: #9ca3af; font-size: 11px; }
        QLabel#NowPlaying { color: #e5e7eb; font-size: 12px; }
        """)
