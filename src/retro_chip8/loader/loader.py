# retro_chip8/loader/loader.py
"""
ROMローダーモジュール。
CHIP-8のROMは形式を持たない生のバイト列で、0x200からロードされます。
"""
import logging

from retro_chip8.arch.chip8.cpu import Chip8Cpu, MAX_PROGRAM_SIZE
from retro_chip8.errors import RomError

logger = logging.getLogger(__name__)

class RomLoader:
    """
    ROMファイルを読み込み、サイズを検証するローダー。
    """
    # @intent:responsibility ROMファイルを読み込み、バイト列を返します。
    # @intent:post-condition 読み込めない、空、または0x200以降に収まらない場合はRomErrorを送出します。
    def read_rom(self, file_path: str) -> bytes:
        try:
            with open(file_path, 'rb') as f:
                data = f.read()
        except OSError as e:
            raise RomError(f"Cannot read ROM file {file_path}: {e}") from e

        if not data:
            raise RomError(f"ROM file {file_path} is empty")
        if len(data) > MAX_PROGRAM_SIZE:
            raise RomError(
                f"ROM file {file_path} is {len(data)} bytes; at most {MAX_PROGRAM_SIZE} bytes can be loaded"
            )
        logger.debug("Read %d bytes from %s", len(data), file_path)
        return data

    # @intent:responsibility ROMファイルを読み込み、CPUにロードします（CPUはリセットされます）。
    def load_rom(self, file_path: str, cpu: Chip8Cpu) -> None:
        cpu.load_program(self.read_rom(file_path))
