from __future__ import annotations

from PyQt6.QtWidgets import QApplication


WORK_COLOR = "#e4572e"
BREAK_COLOR = "#2e9e6b"

THEME_QSS = """
QWidget {
    background: #f4f1ee;
    color: #2f2a26;
    font-size: 13px;
}

QLabel {
    background: transparent;
}

QLabel#Heading {
    font-size: 20px;
    font-weight: 700;
    color: #2a2521;
}

QLabel#ModeLabel {
    font-size: 14px;
    font-weight: 600;
    color: #6f645b;
}

QLabel#TimerLabel {
    font-size: 58px;
    font-weight: 700;
}

QLabel#TimerLabel[kind="work"] {
    color: %(work)s;
}

QLabel#TimerLabel[kind="break"] {
    color: %(break)s;
}

QPushButton {
    border: none;
    background: #f7eee6;
    border-radius: 16px;
    padding: 8px 14px;
    font-weight: 600;
}

QPushButton:hover {
    background: #f2e6dc;
}

QPushButton:pressed {
    background: #e8d8cc;
}

QPushButton#PrimaryButton {
    background: #eb8f60;
    color: #ffffff;
    border-radius: 22px;
    padding: 10px 24px;
    min-height: 24px;
    font-size: 14px;
}

QPushButton#PrimaryButton:hover {
    background: #de8050;
}

QListWidget {
    background: #fff7f1;
    border: none;
    border-radius: 12px;
    padding: 6px;
}

QListWidget::item {
    border-radius: 10px;
    padding: 4px;
}
""" % {"work": WORK_COLOR, "break": BREAK_COLOR}


def apply_theme(app: QApplication) -> None:
    app.setStyleSheet(THEME_QSS)
