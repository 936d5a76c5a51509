# src/retro_chip8/arch/chip8/state.py
"""
CHIP-8 CPU固有の状態定義。
"""
import random
from dataclasses import dataclass, field
from typing import List

from retro_chip8.core.state import CpuState
from retro_chip8.transport.bus import PROGRAM_START

# @intent:constant ディスプレイとスタックの寸法を定義します。
DISPLAY_WIDTH = 64
DISPLAY_HEIGHT = 32
DISPLAY_SIZE = (DISPLAY_WIDTH // 8) * DISPLAY_HEIGHT
STACK_DEPTH = 16
NUM_REGISTERS = 16
NUM_KEYS = 16

# @intent:responsibility CHIP-8の全てのレジスタ、スタック、タイマー、フレームバッファ、キー入力ラッチを保持します。
# @intent:rationale メモリ以外のマシン状態を1つの値にまとめ、リセット時は新しいインスタンスを生成して全フィールドを初期化します。
@dataclass
class Chip8CpuState(CpuState):
    """
    CHIP-8のマシン状態を保持するデータクラス。
    sp はスタックに積まれている戻りアドレスの数を表します。
    """
    pc: int = PROGRAM_START
    v: List[int] = field(default_factory=lambda: [0] * NUM_REGISTERS)
    i: int = 0x0000
    stack: List[int] = field(default_factory=lambda: [0] * STACK_DEPTH)
    delay_timer: int = 0
    sound_timer: int = 0
    framebuffer: bytearray = field(default_factory=lambda: bytearray(DISPLAY_SIZE))
    keypad: int = 0x0000
    previous_keypad: int = 0x0000
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    # @intent:accessor VFレジスタ（キャリー/ボロー/衝突フラグ）へのアクセスを提供します。
    @property
    def vf(self) -> int:
        return self.v[0xF]

    @vf.setter
    def vf(self, value: int) -> None:
        self.v[0xF] = value & 0xFF
