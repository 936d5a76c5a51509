"""
画面命令（クリア、スプライト描画）の実装。
描画アルゴリズム自体は arch.chip8.display に委譲します。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from retro_chip8.arch.chip8 import display
from .base import vreg

# --- CLS (00E0) ---
def decode_cls(opcode: int) -> Operation:
    return Operation(opcode, "CLS", [], key=0x00E0)

def execute_cls(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    display.clear(state)

# --- SCD n (00Cn) ---
# @intent:responsibility 00Cn（非標準拡張）をデコードします。フレームバッファの先頭nバイトをクリアします。
def decode_scd(opcode: int) -> Operation:
    return Operation(opcode, "SCD", [f"#{opcode & 0xF:X}"], key=0x00C0)

def execute_scd(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    display.clear_bytes(state, op.n)

# --- DRW Vx, Vy, n (Dxyn) ---
def decode_drw(opcode: int) -> Operation:
    x, y, n = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF, opcode & 0xF
    return Operation(opcode, "DRW", [vreg(x), vreg(y), f"#{n:X}"], key=0xD000)

def execute_drw(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    display.draw_sprite(state, bus, state.v[op.x], state.v[op.y], op.n)
