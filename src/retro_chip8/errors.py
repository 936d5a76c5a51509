"""
例外階層モジュール。

エミュレータ全体で使用される例外を定義します。
呼び出し側は Chip8Error を捕捉することで、このパッケージ由来の全ての例外をまとめて扱えます。

Chip8Error
├── MachineFault           マシンが継続不能になった状態 (CPUは停止する)
│   ├── StackOverflowError   16段を超えるCALL
│   ├── StackUnderflowError  空のスタックでのRET
│   └── MemoryAccessError    0x000-0xFFF の範囲外アクセス
├── RomError               空・大きすぎる・読み込めないROM
└── ConfigError            不正な設定値
"""


class Chip8Error(Exception):
    """このパッケージの全ての例外の基底クラス。"""
    pass


# @intent:responsibility 実行を継続できないマシン状態を表します。
# @intent:rationale 元の設計では未定義動作（隣接領域の破壊）だった状態を、明示的な致命的エラーとして報告します。
class MachineFault(Chip8Error):
    """
    CPUが実行を継続できない状態。発生時点のPCを保持します。
    """
    def __init__(self, message: str, pc: int = 0):
        super().__init__(message)
        self.message = message
        # 深い層で送出された場合、CPUが実行中の命令のアドレスで上書きします。
        self.pc = pc

    def __str__(self) -> str:
        return f"{self.message} (PC={self.pc:#05x})"


class StackOverflowError(MachineFault):
    pass


class StackUnderflowError(MachineFault):
    pass


# IndexErrorも継承し、バスの範囲外アクセスとして従来通り捕捉できるようにする。
class MemoryAccessError(MachineFault, IndexError):
    """
    アドレス空間外へのアクセス。
    """
    def __init__(self, address: int, pc: int = 0):
        super().__init__(f"Address {address:#06x} is outside of memory", pc)
        self.address = address


class RomError(Chip8Error):
    """ROMイメージが不正（空、または0x200以降に収まらない）な場合に送出されます。"""
    pass


class ConfigError(Chip8Error):
    """設定ファイルまたはコマンドライン引数の値が不正な場合に送出されます。"""
    pass
