"""
キー入力命令の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8 import keypad
from .base import vreg, skip_next

# --- SKP Vx (Ex9E) ---
def decode_skp(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "SKP", [vreg(x)], key=0xE09E)

def execute_skp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if keypad.is_pressed(state, state.v[op.x]):
        skip_next(state)

# --- SKNP Vx (ExA1) ---
def decode_sknp(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "SKNP", [vreg(x)], key=0xE0A1)

def execute_sknp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if not keypad.is_pressed(state, state.v[op.x]):
        skip_next(state)

# --- LD Vx, K (Fx0A) ---
def decode_wait_key(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", [vreg(x), "K"], key=0xF00A)

# @intent:responsibility キー入力を待ちます。新たな押下が観測されるまで、同じ命令を再実行させます。
# @intent:rationale PCは実行前に既に2進んでいるため、待機中はPCを巻き戻して次のtickで再びこの命令をフェッチさせます。
def execute_wait_key(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if not keypad.has_new_press(state):
        state.pc = (state.pc - op.length) & 0xFFFF
        return
    state.v[op.x] = keypad.lowest_pressed(state)
