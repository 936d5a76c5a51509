# retro_chip8/runtime/runner.py
"""
ランナーモジュール。

CPUを一定のクロックで駆動し、表示スレッドとの間で状態を共有する責務を負います。
CPUの状態は1つのロックで保護され、tick、フレームバッファの読み出し、
キーイベントの書き込みはそれぞれ短時間だけロックを保持します。
"""
import logging
import threading
import time
from typing import Optional

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.core.snapshot import Snapshot
from retro_chip8.errors import MachineFault

logger = logging.getLogger(__name__)

# @intent:responsibility CPUの実行ループと、スレッド間で共有される状態へのアクセスを管理します。
class Runner:
    """
    CPUを所有し、クロックに合わせてtickを発行するクラス。
    run() はブロッキングで、別スレッドから stop() を呼ぶか、CPUが停止すると戻ります。
    """
    def __init__(self, cpu: Chip8Cpu, clock: int = 500):
        if clock <= 0:
            raise ValueError("clock must be a positive number of ticks per second")
        self._cpu = cpu
        self._clock = clock
        self._lock = threading.Lock()
        self._running: bool = False
        self._fault: Optional[MachineFault] = None

    @property
    def clock(self) -> int:
        return self._clock

    @property
    def fault(self) -> Optional[MachineFault]:
        """実行ループを停止させたマシン障害（なければNone）。"""
        return self._fault

    @property
    def is_running(self) -> bool:
        return self._running

    def load_program(self, data: bytes) -> None:
        with self._lock:
            self._cpu.load_program(data)
            self._fault = None

    # @intent:responsibility ロックを保持したまま1回tickします。
    def tick(self) -> Snapshot:
        with self._lock:
            return self._cpu.tick()

    def run(self) -> None:
        """
        CPUの実行を継続します。クロック周期ごとに1回tickします。
        """
        self._running = True
        period = 1.0 / self._clock
        logger.info("Running at %d ticks per second", self._clock)

        while self._running:
            try:
                self.tick()
            except MachineFault as fault:
                self._fault = fault
                logger.error("Execution stopped: %s", fault)
                break

            if self.halted:
                logger.info("Machine halted")
                break

            time.sleep(period)

        self._running = False

    def stop(self) -> None:
        self._running = False

    # @intent:responsibility CPUを停止状態にし、実行ループを終了させます。
    def halt(self) -> None:
        with self._lock:
            self._cpu.halt()
        self.stop()

    @property
    def halted(self) -> bool:
        with self._lock:
            return self._cpu.halted

    # --- Presentation thread API ---
    def key_down(self, bits: int) -> None:
        with self._lock:
            self._cpu.key_down(bits)

    def key_up(self, bits: int) -> None:
        with self._lock:
            self._cpu.key_up(bits)

    def set_key_mask(self, mask: int) -> None:
        with self._lock:
            self._cpu.set_key_mask(mask)

    def get_framebuffer(self) -> bytes:
        with self._lock:
            return self._cpu.get_framebuffer()

    @property
    def sound_active(self) -> bool:
        with self._lock:
            return self._cpu.sound_active
