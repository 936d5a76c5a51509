"""
CHIP-8命令実装用の共通ユーティリティ。
"""
from retro_chip8.arch.chip8.state import Chip8CpuState, STACK_DEPTH
from retro_chip8.errors import StackOverflowError, StackUnderflowError

# @intent:utility_function オペランド表示用のレジスタ名を返します。
def vreg(index: int) -> str:
    return f"V{index:X}"

def byte_operand(value: int) -> str:
    return f"#{value:02X}"

def addr_operand(value: int) -> str:
    return f"${value:03X}"

# @intent:utility_function 次の命令をスキップします（PCは既に次の命令を指しているため、さらに2進めます）。
def skip_next(state: Chip8CpuState) -> None:
    state.pc = (state.pc + 2) & 0xFFFF

# @intent:utility_function 戻りアドレスをスタックにプッシュします。
# @intent:pre-condition スタックの使用段数が STACK_DEPTH 未満であること。満杯ならStackOverflowError。
def push(state: Chip8CpuState, address: int) -> None:
    if state.sp >= STACK_DEPTH:
        raise StackOverflowError(f"Call stack overflow ({STACK_DEPTH} entries in use)")
    state.stack[state.sp] = address
    state.sp += 1

# @intent:utility_function スタックから戻りアドレスをポップします。空ならStackUnderflowError。
def pop(state: Chip8CpuState) -> int:
    if state.sp == 0:
        raise StackUnderflowError("Return with an empty call stack")
    state.sp -= 1
    return state.stack[state.sp]
