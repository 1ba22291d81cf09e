from __future__ import annotations

from PyQt6.QtCore import Qt
from PyQt6.QtGui import QAction, QColor, QKeySequence
from PyQt6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pomodoro.core.app_state import KIND_LABELS, AppState, describe_record
from pomodoro.core.timer import SessionKind
from pomodoro.ui.styles import BREAK_COLOR, WORK_COLOR


MODE_TEXT = {
    SessionKind.WORK: f"Mode: Work ({SessionKind.WORK.duration_sec // 60})",
    SessionKind.BREAK: f"Mode: Break ({SessionKind.BREAK.duration_sec // 60})",
}


class MainWindow(QMainWindow):
    def __init__(self, app_state: AppState) -> None:
        super().__init__()
        self.setWindowTitle("Pomodoro")
        self.resize(420, 560)

        self.app_state = app_state

        self._build_ui()
        self._connect_signals()
        self.refresh_timer()
        self.refresh_history()

    def _build_ui(self) -> None:
        central = QWidget(self)
        self.setCentralWidget(central)
        layout = QVBoxLayout(central)

        heading = QLabel("Pomodoro")
        heading.setObjectName("Heading")
        layout.addWidget(heading)

        self.mode_label = QLabel()
        self.mode_label.setObjectName("ModeLabel")
        layout.addWidget(self.mode_label)

        self.timer_label = QLabel("25:00")
        self.timer_label.setObjectName("TimerLabel")
        self.timer_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        layout.addWidget(self.timer_label)

        controls = QHBoxLayout()
        self.start_pause_btn = QPushButton("Start")
        self.start_pause_btn.setObjectName("PrimaryButton")
        self.reset_btn = QPushButton("Reset")
        self.switch_btn = QPushButton("Switch session")
        controls.addWidget(self.start_pause_btn)
        controls.addWidget(self.reset_btn)
        controls.addWidget(self.switch_btn)
        layout.addLayout(controls)

        history_bar = QHBoxLayout()
        history_bar.addWidget(QLabel("History"))
        history_bar.addStretch()
        self.clear_btn = QPushButton("Clear history")
        history_bar.addWidget(self.clear_btn)
        layout.addLayout(history_bar)

        self.history_list = QListWidget()
        layout.addWidget(self.history_list, 1)

        space_action = QAction(self)
        space_action.setShortcut(QKeySequence(Qt.Key.Key_Space))
        space_action.triggered.connect(self._toggle)
        self.addAction(space_action)

    def _connect_signals(self) -> None:
        self.start_pause_btn.clicked.connect(self._toggle)
        self.reset_btn.clicked.connect(self.app_state.reset)
        self.switch_btn.clicked.connect(self.app_state.switch_type)
        self.clear_btn.clicked.connect(self.app_state.clear_history)
        self.app_state.state_changed.connect(self.refresh_timer)
        self.app_state.history_changed.connect(self.refresh_history)

    def _toggle(self) -> None:
        if self.app_state.is_running:
            self.app_state.pause()
        else:
            self.app_state.start()

    def refresh_timer(self) -> None:
        kind = self.app_state.kind
        self.mode_label.setText(MODE_TEXT[kind])
        self.timer_label.setText(self.app_state.formatted)
        self.timer_label.setProperty("kind", kind.value)
        # dynamic property selectors only apply after a re-polish
        self.timer_label.style().unpolish(self.timer_label)
        self.timer_label.style().polish(self.timer_label)
        self.start_pause_btn.setText("Pause" if self.app_state.is_running else "Start")

    def refresh_history(self) -> None:
        self.history_list.clear()
        records = self.app_state.history
        if not records:
            QListWidgetItem("No sessions yet", self.history_list)
            return
        for record in records:
            item = QListWidgetItem(describe_record(record), self.history_list)
            item.setForeground(QColor(WORK_COLOR if record.kind is SessionKind.WORK else BREAK_COLOR))
            item.setToolTip(KIND_LABELS[record.kind])
