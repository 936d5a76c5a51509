# src/retro_chip8/arch/chip8/cpu.py
"""
CHIP-8 CPUエミュレーションの中心モジュール。
"""
import logging
import random
from typing import Optional

from retro_chip8.core.snapshot import Operation, Snapshot
from retro_chip8.core.cpu import AbstractCpu
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8 import keypad
from retro_chip8.transport.bus import Bus, MEMORY_SIZE, PROGRAM_START
from retro_chip8.arch.chip8.instructions import decode_opcode, execute_instruction
from retro_chip8.errors import RomError

logger = logging.getLogger(__name__)

# @intent:constant 0x200以降に格納できるプログラムの最大サイズ。
MAX_PROGRAM_SIZE = MEMORY_SIZE - PROGRAM_START

# @intent:responsibility CHIP-8 CPUの具体的なエミュレーションロジック（フェッチ、デコード、実行、タイマー、キー入力）を提供します。
class Chip8Cpu(AbstractCpu):
    """
    CHIP-8仮想マシンをエミュレートするクラス。

    ホストからの操作は tick / key_down / key_up / set_key_mask / get_framebuffer などの
    境界メソッドに限られます。スレッドセーフではないため、複数スレッドから使う場合は
    呼び出し側で排他制御を行います。
    """
    def __init__(self, bus: Bus, seed: Optional[int] = None):
        self._rng = random.Random(seed)
        super().__init__(bus)

    def _create_initial_state(self) -> Chip8CpuState:
        return Chip8CpuState(rng=self._rng)

    # @intent:responsibility メモリとマシン状態を全てゼロクリアし、PCを0x200に戻します。
    def reset(self) -> None:
        logger.info("Resetting machine")
        self._bus.clear()
        super().reset()

    # @intent:responsibility プログラムを0x200からロードします。
    # @intent:pre-condition data は空でなく、MAX_PROGRAM_SIZE バイト以下であること。違反時は状態を変更せずにRomErrorを送出します。
    def load_program(self, data: bytes) -> None:
        if len(data) == 0:
            raise RomError("Program is empty")
        if len(data) > MAX_PROGRAM_SIZE:
            raise RomError(f"Program is {len(data)} bytes, at most {MAX_PROGRAM_SIZE} bytes fit after {PROGRAM_START:#05x}")
        self.reset()
        logger.info("Loading program (%d bytes)", len(data))
        self._bus.load(PROGRAM_START, bytes(data))

    # @intent:responsibility タイマーを1回減算してから1命令を実行します。
    def tick(self) -> Snapshot:
        """
        遅延タイマーとサウンドタイマーをそれぞれ（0でなければ）1減らし、
        続けて1命令を実行します。停止中は何もしません。
        """
        state = self._state
        if not state.halted:
            if state.delay_timer > 0:
                state.delay_timer -= 1
            if state.sound_timer > 0:
                state.sound_timer -= 1
        return self.step()

    # @intent:responsibility PCの位置から2バイトをビッグエンディアンでフェッチします。
    def _fetch(self) -> int:
        pc = self._state.pc
        return (self._bus.read(pc) << 8) | self._bus.read(pc + 1)

    def _decode(self, opcode: int) -> Operation:
        return decode_opcode(opcode)

    def _execute(self, operation: Operation) -> None:
        execute_instruction(operation, self._state, self._bus)

    # @intent:responsibility 命令サイクルの終わりにキー入力ラッチを更新します（エッジ検出のリセット）。
    def _after_execute(self, operation: Operation) -> None:
        keypad.latch(self._state)

    # --- Input Latch ---
    def set_key_mask(self, mask: int) -> None:
        keypad.set_key_mask(self._state, mask)

    def key_down(self, bits: int) -> None:
        keypad.key_down(self._state, bits)

    def key_up(self, bits: int) -> None:
        keypad.key_up(self._state, bits)

    # --- Presentation ---
    # @intent:responsibility 表示用にフレームバッファのコピー（256バイト）を返します。
    def get_framebuffer(self) -> bytes:
        return bytes(self._state.framebuffer)

    # @intent:responsibility サウンドタイマーが0でない間、音を鳴らすべきであることを示します。
    @property
    def sound_active(self) -> bool:
        return self._state.sound_timer > 0

    # @intent:responsibility メモリ内容をログなしで読み出します（テスト・表示用）。
    def peek(self, address: int) -> int:
        return self._bus.read(address)

