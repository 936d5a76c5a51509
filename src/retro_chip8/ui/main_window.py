# src/retro_chip8/ui/main_window.py
"""
メインウィンドウの実装。
CPUの実行スレッドを起動し、画面表示・キー入力・ビープ音をRunner経由でCPUと結び付けます。
"""
import logging

from PySide6.QtWidgets import QMainWindow
from PySide6.QtGui import QCloseEvent, QKeyEvent
from PySide6.QtCore import QThread, QTimer, Signal

from retro_chip8.arch.chip8.state import DISPLAY_WIDTH, DISPLAY_HEIGHT
from retro_chip8.config.models import HostConfig
from retro_chip8.runtime.runner import Runner
from .framebuffer_view import FramebufferView
from .keymap import build_key_masks

logger = logging.getLogger(__name__)

# @intent:constant 表示の更新周期（ミリ秒）。おおよそ60Hz。
REFRESH_INTERVAL_MS = 16

# @intent:responsibility Runnerのrunメソッドをバックグラウンドで実行します。
class MachineThread(QThread):
    """
    Runner.run() をノンブロッキングで実行するためのスレッド。
    """
    # 停止理由（マシン障害のメッセージ、なければ空文字列）
    stopped = Signal(str)

    def __init__(self, runner: Runner):
        super().__init__()
        self.runner = runner

    def run(self):
        self.runner.run()
        fault = self.runner.fault
        self.stopped.emit(str(fault) if fault else "")


# @intent:responsibility アプリケーションのメインウィンドウを定義し、表示・入力・音声を組み立てます。
class MainWindow(QMainWindow):
    """
    CHIP-8を実行するメインウィンドウ。
    """
    def __init__(self, runner: Runner, config: HostConfig, beeper=None, parent=None):
        super(MainWindow, self).__init__(parent)
        self.setWindowTitle("Retro CHIP-8")
        self.runner = runner
        self.config = config
        self.beeper = beeper
        self.key_masks = build_key_masks(config.keymap)

        self.view = FramebufferView(config.background, config.foreground, config.scale, self)
        self.setCentralWidget(self.view)
        self.resize(DISPLAY_WIDTH * config.scale, DISPLAY_HEIGHT * config.scale)

        self.machine_thread = MachineThread(runner)
        self.machine_thread.stopped.connect(self._on_machine_stopped)

        self.refresh_timer = QTimer(self)
        self.refresh_timer.setInterval(REFRESH_INTERVAL_MS)
        self.refresh_timer.timeout.connect(self.refresh)

    # @intent:responsibility 実行スレッドと表示タイマーを開始します。
    def start(self) -> None:
        self.refresh_timer.start()
        self.machine_thread.start()

    # @intent:responsibility フレームバッファとサウンド状態をCPUから取り込み、表示と音声を更新します。
    def refresh(self) -> None:
        self.view.update_framebuffer(self.runner.get_framebuffer())
        if self.beeper is not None:
            self.beeper.update(self.runner.sound_active)

    def _on_machine_stopped(self, message: str) -> None:
        if self.beeper is not None:
            self.beeper.update(False)
        if message:
            self.statusBar().showMessage(f"Stopped: {message}")
        else:
            self.statusBar().showMessage("Halted")

    # @intent:responsibility 割り当て済みのキーが押されたらCHIP-8のキーマスクを立てます。オートリピートは無視します。
    def keyPressEvent(self, event: QKeyEvent):
        mask = self.key_masks.get(int(event.key()))
        if mask is None or event.isAutoRepeat():
            super().keyPressEvent(event)
            return
        self.runner.key_down(mask)

    def keyReleaseEvent(self, event: QKeyEvent):
        mask = self.key_masks.get(int(event.key()))
        if mask is None or event.isAutoRepeat():
            super().keyReleaseEvent(event)
            return
        self.runner.key_up(mask)

    # @intent:responsibility ウィンドウを閉じる際にCPUを停止し、実行スレッドの終了を待ちます。
    def closeEvent(self, event: QCloseEvent):
        self.refresh_timer.stop()
        if self.machine_thread.isRunning():
            # 終了通知のシグナルはもう受け取らない
            try:
                self.machine_thread.stopped.disconnect(self._on_machine_stopped)
            except RuntimeError:
                pass
        self.runner.halt()
        self.machine_thread.wait()
        if self.beeper is not None:
            self.beeper.close()
        logger.info("Window closed")
        event.accept()
