"""
CHIP-8命令セット実装パッケージ。
"""
import logging

from retro_chip8.transport.bus import Bus
from retro_chip8.core.snapshot import Operation
from retro_chip8.arch.chip8.state import Chip8CpuState
from .maps import DECODE_MAP, EXECUTE_MAP, dispatch_key

logger = logging.getLogger(__name__)

UNKNOWN_KEY = -1

# @intent:responsibility CHIP-8のオペコードをデコードします。
def decode_opcode(opcode: int) -> Operation:
    """
    CHIP-8のオペコードをデコードし、Operationオブジェクトを返します。
    テーブルに存在しないオペコードは UNKNOWN として返します。
    """
    decoder = DECODE_MAP.get(dispatch_key(opcode))
    if decoder:
        return decoder(opcode)
    return Operation(opcode, "UNKNOWN", [f"${opcode:04X}"], key=UNKNOWN_KEY)

# @intent:responsibility デコードされたCHIP-8命令を実行します。
# @intent:post-condition 未知の命令はログに記録するのみで、PCを進めた以外の副作用はありません。
def execute_instruction(operation: Operation, state: Chip8CpuState, bus: Bus) -> None:
    """
    デコードされたCHIP-8命令を実行し、CPUの状態を変更します。
    """
    executor = EXECUTE_MAP.get(operation.key)
    if executor is None:
        logger.warning("Unknown opcode: %#06x", operation.opcode)
        return
    executor(state, bus, operation)
