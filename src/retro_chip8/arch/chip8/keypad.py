# src/retro_chip8/arch/chip8/keypad.py
"""
CHIP-8の16キー入力ラッチ。

現在のキーマスクと、直前の命令サイクル終了時点のキーマスクを保持し、
キー待ち命令(Fx0A)のためのエッジ検出を提供します。
"""
from typing import Optional

from retro_chip8.arch.chip8.state import Chip8CpuState, NUM_KEYS

KEY_MASK_ALL = 0xFFFF

# @intent:utility_function キー番号(0x0-0xF)をキーマスクのビットに変換します。
def key_bit(key: int) -> int:
    return 1 << (key & 0xF)

# @intent:responsibility キーマスクを置き換えます。置き換え前の値は previous に保存されます。
def set_key_mask(state: Chip8CpuState, mask: int) -> None:
    state.previous_keypad = state.keypad
    state.keypad = mask & KEY_MASK_ALL

def key_down(state: Chip8CpuState, bits: int) -> None:
    set_key_mask(state, state.keypad | bits)

def key_up(state: Chip8CpuState, bits: int) -> None:
    set_key_mask(state, state.keypad & ~bits)

def is_pressed(state: Chip8CpuState, key: int) -> bool:
    return (state.keypad & key_bit(key)) != 0

# @intent:responsibility 押されているキーのうち最も番号の小さいものを返します。
def lowest_pressed(state: Chip8CpuState) -> Optional[int]:
    for key in range(NUM_KEYS):
        if state.keypad & key_bit(key):
            return key
    return None

# @intent:responsibility 前回サンプルから変化があり、かつ何らかのキーが押されているかを判定します。
def has_new_press(state: Chip8CpuState) -> bool:
    return state.keypad != state.previous_keypad and state.keypad != 0

# @intent:responsibility 命令サイクル終了時に呼ばれ、previous を current に揃えます。
def latch(state: Chip8CpuState) -> None:
    state.previous_keypad = state.keypad
