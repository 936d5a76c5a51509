"""
算術論理演算命令の実装。

フラグを更新する命令は、結果をVxに書き込んだ後でVFを設定します。
そのため x == F の場合はフラグの値が残ります。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import vreg, byte_operand

# @intent:utility_function Vx, Vy 形式の8xy*命令をデコードする共通処理。
def _decode_reg_reg(opcode: int, mnemonic: str) -> Operation:
    x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
    return Operation(opcode, mnemonic, [vreg(x), vreg(y)], key=opcode & 0xF00F)

# --- ADD Vx, nn (7xnn) ---
def decode_add_imm(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "ADD", [vreg(x), byte_operand(opcode & 0xFF)], key=0x7000)

# @intent:responsibility 7xnnを実行します。桁あふれは切り捨て、VFは変更しません。
def execute_add_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] = (state.v[op.x] + op.nn) & 0xFF

# --- LD Vx, Vy (8xy0) ---
def decode_ld_reg(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "LD")

def execute_ld_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] = state.v[op.y]

# --- OR / AND / XOR (8xy1 - 8xy3) ---
def decode_or(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "OR")

def execute_or(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] |= state.v[op.y]

def decode_and(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "AND")

def execute_and(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] &= state.v[op.y]

def decode_xor(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "XOR")

def execute_xor(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] ^= state.v[op.y]

# --- ADD Vx, Vy (8xy4) ---
def decode_add_reg(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "ADD")

# @intent:responsibility 8xy4を実行し、キャリーをVFに設定します。
def execute_add_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    res = state.v[op.x] + state.v[op.y]
    state.v[op.x] = res & 0xFF
    state.vf = 1 if res > 0xFF else 0

# --- SUB Vx, Vy (8xy5) ---
def decode_sub(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "SUB")

# @intent:responsibility 8xy5を実行します。ボローが発生しなければ VF=1。
def execute_sub(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v1 - v2) & 0xFF
    state.vf = 1 if v1 >= v2 else 0

# --- SHR Vx (8xy6) ---
def decode_shr(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "SHR")

# @intent:responsibility 8xy6を実行します。Vyは使用せず、Vx自身をシフトします。
def execute_shr(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    value = state.v[op.x]
    state.v[op.x] = value >> 1
    state.vf = value & 0x01

# --- SUBN Vx, Vy (8xy7) ---
def decode_subn(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "SUBN")

def execute_subn(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    v1, v2 = state.v[op.x], state.v[op.y]
    state.v[op.x] = (v2 - v1) & 0xFF
    state.vf = 1 if v2 >= v1 else 0

# --- SHL Vx (8xyE) ---
def decode_shl(opcode: int) -> Operation:
    return _decode_reg_reg(opcode, "SHL")

def execute_shl(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    value = state.v[op.x]
    state.v[op.x] = (value << 1) & 0xFF
    state.vf = value >> 7

# --- RND Vx, nn (Cxnn) ---
def decode_rnd(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "RND", [vreg(x), byte_operand(opcode & 0xFF)], key=0xC000)

# @intent:responsibility Cxnnを実行します。乱数源は状態に保持されたRandomインスタンスです（シード指定で再現可能）。
def execute_rnd(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] = state.rng.randint(0, 0xFF) & op.nn
