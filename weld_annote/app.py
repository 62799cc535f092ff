# weld_annote/app.py
from __future__ import annotations

import logging
import sys
from typing import Optional

from PyQt5.QtWidgets import QApplication

from .main_window import MainWindow
from .persistence import load_app_config


LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(level=logging.DEBUG if debug else logging.INFO, format=LOG_FORMAT)


def run_app(video_path: Optional[str] = None, debug: bool = False, config_dir: Optional[str] = None) -> int:
    configure_logging(debug)
    app = QApplication(sys.argv[:1])

    cfg = load_app_config(config_dir)
    win = MainWindow(cfg=cfg, config_dir=config_dir)
    win.show()

    # Start by asking for a video, like opening the tool always did
    if video_path:
        win.open_video(video_path)
    else:
        win.choose_video()

    return app.exec_()
