from typing import Tuple

from retro_chip8.transport.bus import Bus, RAM, MEMORY_SIZE
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from .models import HostConfig

# @intent:responsibility ホスト設定に基づいて、Bus、RAM、CPUを生成・接続します。
class SystemBuilder:
    def build_system(self, config: HostConfig) -> Tuple[Chip8Cpu, Bus]:
        bus = Bus()
        bus.register_device(0x000, MEMORY_SIZE - 1, RAM(MEMORY_SIZE))
        cpu = Chip8Cpu(bus, seed=config.seed)
        return cpu, bus
