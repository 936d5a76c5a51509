"""
制御命令（ジャンプ、サブルーチン、条件スキップ）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import vreg, byte_operand, addr_operand, skip_next, push, pop

# --- SYS (0nnn) ---
# @intent:responsibility SYS命令をデコードします。実機のマシン語呼び出しは再現せず、何もしません。
def decode_sys(opcode: int) -> Operation:
    return Operation(opcode, "SYS", [addr_operand(opcode & 0xFFF)], key=0x0000)

def execute_sys(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    pass

# --- RET (00EE) ---
def decode_ret(opcode: int) -> Operation:
    return Operation(opcode, "RET", [], key=0x00EE)

# @intent:responsibility RET命令を実行し、スタックから戻りアドレスをポップしてPCに設定します。
def execute_ret(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = pop(state)

# --- JP (1nnn) ---
def decode_jp(opcode: int) -> Operation:
    return Operation(opcode, "JP", [addr_operand(opcode & 0xFFF)], key=0x1000)

def execute_jp(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = op.nnn

# --- CALL (2nnn) ---
def decode_call(opcode: int) -> Operation:
    return Operation(opcode, "CALL", [addr_operand(opcode & 0xFFF)], key=0x2000)

# @intent:responsibility CALL命令を実行し、戻りアドレスをスタックにプッシュしてからジャンプします。
def execute_call(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    # state.pc is already pointing to the NEXT instruction
    push(state, state.pc)
    state.pc = op.nnn

# --- SE Vx, nn (3xnn) ---
def decode_se_imm(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "SE", [vreg(x), byte_operand(opcode & 0xFF)], key=0x3000)

def execute_se_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[op.x] == op.nn:
        skip_next(state)

# --- SNE Vx, nn (4xnn) ---
def decode_sne_imm(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "SNE", [vreg(x), byte_operand(opcode & 0xFF)], key=0x4000)

def execute_sne_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[op.x] != op.nn:
        skip_next(state)

# --- SE Vx, Vy (5xy0) ---
def decode_se_reg(opcode: int) -> Operation:
    x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
    return Operation(opcode, "SE", [vreg(x), vreg(y)], key=0x5000)

def execute_se_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[op.x] == state.v[op.y]:
        skip_next(state)

# --- SNE Vx, Vy (9xy0) ---
def decode_sne_reg(opcode: int) -> Operation:
    x, y = (opcode >> 8) & 0xF, (opcode >> 4) & 0xF
    return Operation(opcode, "SNE", [vreg(x), vreg(y)], key=0x9000)

def execute_sne_reg(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    if state.v[op.x] != state.v[op.y]:
        skip_next(state)

# --- JP V0, nnn (Bnnn) ---
def decode_jp_v0(opcode: int) -> Operation:
    return Operation(opcode, "JP", ["V0", addr_operand(opcode & 0xFFF)], key=0xB000)

def execute_jp_v0(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.pc = state.v[0] + op.nnn
