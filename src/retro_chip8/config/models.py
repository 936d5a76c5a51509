from dataclasses import dataclass, field
from typing import Dict, Optional

# @intent:map ホストのキー名からCHIP-8のキー番号(0x0-0xF)への既定の対応。同じ16進数字のキーに割り当てます。
DEFAULT_KEYMAP: Dict[str, int] = {f"{key:X}": key for key in range(16)}

@dataclass
class HostConfig:
    clock: int = 500  # 1秒あたりのtick数
    scale: int = 10  # 1ピクセルあたりの画面上のドット数 (64x32 -> 640x320)
    background: str = "#000000"
    foreground: str = "#FFFFFF"
    volume: float = 0.25
    tone: float = 880.0  # ビープ音の周波数 (Hz)
    seed: Optional[int] = None  # 乱数シード（Cxnnの再現用）
    keymap: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))
