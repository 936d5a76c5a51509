# src/retro_chip8/ui/beeper.py
"""
サウンドタイマーに連動する矩形波ビーパー。

CPUは「音を鳴らすべきか」(sound_active) のみを公開し、波形の生成と再生開始・停止の判断は
このモジュールが行います。
"""
import array
import logging
import os
import tempfile
import wave

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100
LOOP_SECONDS = 0.5

# @intent:utility_function 16bitモノラルの矩形波サンプル列を生成します。
def build_square_wave(frequency: float, volume: float, sample_rate: int = SAMPLE_RATE,
                      duration: float = LOOP_SECONDS) -> array.array:
    amplitude = int(32767 * max(0.0, min(volume, 1.0)))
    phase_inc = frequency / sample_rate
    phase = 0.0
    samples = array.array('h')
    for _ in range(int(sample_rate * duration)):
        samples.append(amplitude if phase <= 0.5 else -amplitude)
        phase = (phase + phase_inc) % 1.0
    return samples

def write_wave_file(path: str, samples: array.array, sample_rate: int = SAMPLE_RATE) -> None:
    with wave.open(path, 'wb') as f:
        f.setnchannels(1)
        f.setsampwidth(2)
        f.setframerate(sample_rate)
        f.writeframes(samples.tobytes())

# @intent:responsibility 生成した矩形波をループ再生し、サウンドタイマーの状態に合わせて開始・停止します。
class SquareWaveBeeper:
    def __init__(self, frequency: float = 880.0, volume: float = 0.25, parent=None):
        fd, self._path = tempfile.mkstemp(prefix="retro-chip8-", suffix=".wav")
        os.close(fd)
        write_wave_file(self._path, build_square_wave(frequency, volume))

        self._effect = QSoundEffect(parent)
        self._effect.setSource(QUrl.fromLocalFile(self._path))
        self._effect.setLoopCount(QSoundEffect.Loop.Infinite.value)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    # @intent:responsibility サウンドタイマーが0でない間だけ再生します。状態が変わらなければ何もしません。
    def update(self, sound_active: bool) -> None:
        if sound_active and not self._active:
            self._effect.play()
            self._active = True
        elif not sound_active and self._active:
            self._effect.stop()
            self._active = False

    def close(self) -> None:
        self._effect.stop()
        self._active = False
        try:
            os.remove(self._path)
        except OSError as e:
            logger.debug("Could not remove %s: %s", self._path, e)
