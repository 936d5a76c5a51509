# src/retro_chip8/ui/framebuffer_view.py
"""
フレームバッファを表示するウィジェット。
消灯ピクセルは背景色を半透明で重ねて描くため、消えたピクセルは数フレームかけて
フェードアウトします（CRTモニタの残光の再現）。
"""
from PySide6.QtWidgets import QWidget
from PySide6.QtCore import QRect
from PySide6.QtGui import QPainter, QColor, QImage

from retro_chip8.arch.chip8.state import DISPLAY_WIDTH, DISPLAY_HEIGHT
from retro_chip8.arch.chip8.display import iter_rows

# @intent:constant 消灯ピクセルに重ねる背景色のアルファ値。
FADE_ALPHA = 48

# @intent:responsibility パック形式のフレームバッファを、64x32のQImageに重ね描きします。
def render_framebuffer(image: QImage, framebuffer: bytes, background: QColor, foreground: QColor) -> None:
    fade = QColor(background)
    fade.setAlpha(FADE_ALPHA)

    painter = QPainter(image)
    try:
        for y, row in enumerate(iter_rows(framebuffer)):
            for x, lit in enumerate(row):
                painter.fillRect(x, y, 1, 1, foreground if lit else fade)
    finally:
        painter.end()

# @intent:responsibility フレームバッファを整数倍に拡大して表示します。
class FramebufferView(QWidget):
    """
    CHIP-8の画面を表示するウィジェット。
    update_framebuffer() で受け取った内容をオフスクリーン画像に重ね描きし、
    ウィジェットに収まる最大の整数倍で拡大表示します。
    """
    def __init__(self, background: str = "#000000", foreground: str = "#FFFFFF", scale: int = 10, parent=None):
        super().__init__(parent)
        self._background = QColor(background)
        self._foreground = QColor(foreground)
        self._image = QImage(DISPLAY_WIDTH, DISPLAY_HEIGHT, QImage.Format.Format_ARGB32)
        self._image.fill(self._background)
        self.setMinimumSize(DISPLAY_WIDTH, DISPLAY_HEIGHT)
        self.resize(DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale)

    def image(self) -> QImage:
        return self._image

    def update_framebuffer(self, framebuffer: bytes) -> None:
        render_framebuffer(self._image, framebuffer, self._background, self._foreground)
        self.update()

    # @intent:responsibility ウィジェットに収まる最大の整数倍率を返します（最小1）。
    def pixel_scale(self) -> int:
        return max(1, min(self.width() // DISPLAY_WIDTH, self.height() // DISPLAY_HEIGHT))

    def paintEvent(self, event):
        scale = self.pixel_scale()
        painter = QPainter(self)
        painter.fillRect(self.rect(), self._background)
        painter.drawImage(QRect(0, 0, DISPLAY_WIDTH * scale, DISPLAY_HEIGHT * scale), self._image)
        painter.end()
