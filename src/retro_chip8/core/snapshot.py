# retro_chip8/core/snapshot.py
"""
実行状態のスナップショット

このモジュールは、1命令の実行結果を記録するデータ構造を定義します。
ホスト側（ランナー、UI、テスト）への情報提供に用いる責務を負います。
"""
from dataclasses import dataclass, field
from typing import List, Optional

from retro_chip8.core.state import CpuState

# @intent:responsibility デコードされた命令の詳細を記録します。
@dataclass(frozen=True) # 不変データ構造
class Operation:
    """
    デコードされた命令の詳細（オペコード、ニーモニック、オペランドフィールド）を記録するデータクラス。
    """
    opcode: int # 例: 0x8014
    mnemonic: str # 例: "ADD"
    operands: List[str] = field(default_factory=list) # 例: ["V0", "V1"]
    key: int = 0x0000 # 命令テーブルのキー（例: 8xy4 -> 0x8004）
    length: int = 2 # 命令のバイト長

    @property
    def opcode_hex(self) -> str:
        return f"{self.opcode:04X}"

    # @intent:accessor オペコードの各フィールドを取り出します。
    @property
    def x(self) -> int:
        return (self.opcode >> 8) & 0xF

    @property
    def y(self) -> int:
        return (self.opcode >> 4) & 0xF

    @property
    def n(self) -> int:
        return self.opcode & 0xF

    @property
    def nn(self) -> int:
        return self.opcode & 0xFF

    @property
    def nnn(self) -> int:
        return self.opcode & 0xFFF

# @intent:responsibility 実行に関するメタデータを記録します。
@dataclass(frozen=True)
class Metadata:
    """
    実行に関するメタデータ（累計命令数、表示用テキスト）を記録するデータクラス。
    """
    cycle_count: int
    symbol_info: Optional[str] = None # 例: "ADD V0, V1"

# @intent:responsibility ある一時点におけるCPUの状態と、直前に実行した命令を記録します。
@dataclass(frozen=True)
class Snapshot:
    """
    1命令実行後のCPU状態と、その命令の情報をまとめたデータ構造。
    state は実行中のCPUと共有されるため、保持し続ける場合は呼び出し側でコピーします。
    """
    state: CpuState
    operation: Operation
    metadata: Metadata
