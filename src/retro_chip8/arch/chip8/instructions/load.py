"""
転送命令（レジスタ、インデックス、タイマー、メモリ）の実装。
"""
from retro_chip8.core.snapshot import Operation
from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState
from .base import vreg, byte_operand, addr_operand

# @intent:constant 組み込みフォントの1文字あたりのバイト数（Fx29のアドレス計算に使用）。
FONT_SPRITE_BYTES = 5

# --- LD Vx, nn (6xnn) ---
def decode_ld_imm(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", [vreg(x), byte_operand(opcode & 0xFF)], key=0x6000)

def execute_ld_imm(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] = op.nn

# --- LD I, nnn (Annn) ---
def decode_ld_i(opcode: int) -> Operation:
    return Operation(opcode, "LD", ["I", addr_operand(opcode & 0xFFF)], key=0xA000)

def execute_ld_i(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = op.nnn

# --- LD Vx, DT (Fx07) ---
def decode_ld_vx_dt(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", [vreg(x), "DT"], key=0xF007)

def execute_ld_vx_dt(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.v[op.x] = state.delay_timer

# --- LD DT, Vx (Fx15) ---
def decode_ld_dt(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", ["DT", vreg(x)], key=0xF015)

def execute_ld_dt(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.delay_timer = state.v[op.x]

# --- LD ST, Vx (Fx18) ---
def decode_ld_st(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", ["ST", vreg(x)], key=0xF018)

def execute_ld_st(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.sound_timer = state.v[op.x]

# --- ADD I, Vx (Fx1E) ---
def decode_add_i(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "ADD", ["I", vreg(x)], key=0xF01E)

def execute_add_i(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = (state.i + state.v[op.x]) & 0xFFFF

# --- LD F, Vx (Fx29) ---
def decode_ld_f(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", ["F", vreg(x)], key=0xF029)

# @intent:responsibility Fx29を実行します。フォントはロードされないため、アドレス規約(Vx*5)のみを再現します。
def execute_ld_f(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    state.i = state.v[op.x] * FONT_SPRITE_BYTES

# --- LD B, Vx (Fx33) ---
def decode_ld_bcd(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", ["B", vreg(x)], key=0xF033)

# @intent:responsibility Vxの10進3桁（百、十、一の位）を memory[I], [I+1], [I+2] に格納します。
def execute_ld_bcd(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    value = state.v[op.x]
    bus.check_range(state.i, 3)
    bus.write(state.i, value // 100)
    bus.write(state.i + 1, (value // 10) % 10)
    bus.write(state.i + 2, value % 10)

# --- LD [I], Vx (Fx55) ---
def decode_store(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", ["[I]", vreg(x)], key=0xF055)

# @intent:responsibility V0..Vx を memory[I] から順に格納します。Iは変更しません。
def execute_store(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    count = op.x + 1
    bus.check_range(state.i, count)
    for offset in range(count):
        bus.write(state.i + offset, state.v[offset])

# --- LD Vx, [I] (Fx65) ---
def decode_read(opcode: int) -> Operation:
    x = (opcode >> 8) & 0xF
    return Operation(opcode, "LD", [vreg(x), "[I]"], key=0xF065)

def execute_read(state: Chip8CpuState, bus: Bus, op: Operation) -> None:
    count = op.x + 1
    bus.check_range(state.i, count)
    for offset in range(count):
        state.v[offset] = bus.read(state.i + offset)
