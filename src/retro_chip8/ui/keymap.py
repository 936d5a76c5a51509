# src/retro_chip8/ui/keymap.py
"""
ホストのキーボードとCHIP-8の16キーの対応付け。
"""
from typing import Dict

from PySide6.QtCore import Qt

from retro_chip8.errors import ConfigError

# @intent:utility_function 設定上のキー名（"1", "A", "Space" など）をQtのキーコードに変換します。
def qt_key_code(name: str) -> int:
    qt_key = getattr(Qt.Key, f"Key_{str(name).capitalize()}", None)
    if qt_key is None:
        raise ConfigError(f"Unknown host key name {name!r}")
    return qt_key.value

# @intent:responsibility 設定のキーマップから「Qtキーコード -> CHIP-8キーマスク」の表を作ります。
# @intent:rationale 複数のCHIP-8キーを同じホストキーに割り当てた場合、マスクはORで合成されます。
def build_key_masks(keymap: Dict[str, int]) -> Dict[int, int]:
    masks: Dict[int, int] = {}
    for name, key in keymap.items():
        code = qt_key_code(name)
        masks[code] = masks.get(code, 0) | (1 << (key & 0xF))
    return masks
