# src/retro_chip8/arch/chip8/display.py
"""
CHIP-8ディスプレイ（パック形式モノクロフレームバッファ）の操作。

フレームバッファは1バイトに8ピクセルを格納し、行優先で並びます。
各バイトの最上位ビットが最も左のピクセルです。
"""
from typing import Iterator, List

from retro_chip8.transport.bus import Bus
from retro_chip8.arch.chip8.state import Chip8CpuState, DISPLAY_WIDTH, DISPLAY_HEIGHT, DISPLAY_SIZE

BYTES_PER_ROW = DISPLAY_WIDTH // 8

# @intent:utility_function ピクセル座標からフレームバッファのバイト位置とビットマスクを求めます。
def pixel_position(x: int, y: int):
    index = y * BYTES_PER_ROW + x // 8
    mask = 0x80 >> (x % 8)
    return index, mask

def get_pixel(framebuffer: bytes, x: int, y: int) -> bool:
    index, mask = pixel_position(x % DISPLAY_WIDTH, y % DISPLAY_HEIGHT)
    return (framebuffer[index] & mask) != 0

# @intent:responsibility フレームバッファを全てクリアします。
def clear(state: Chip8CpuState) -> None:
    state.framebuffer[:] = bytes(DISPLAY_SIZE)

# @intent:responsibility フレームバッファの先頭nバイトのみをクリアします（00Cn）。
def clear_bytes(state: Chip8CpuState, count: int) -> None:
    count = min(count, DISPLAY_SIZE)
    state.framebuffer[:count] = bytes(count)

# @intent:responsibility スプライトをXOR描画し、衝突フラグ(VF)を更新します。
# @intent:pre-condition I から n バイトがメモリ範囲内であること（範囲外なら描画前にMemoryAccessError）。
def draw_sprite(state: Chip8CpuState, bus: Bus, x: int, y: int, height: int) -> None:
    """
    memory[I] から height バイトを 8 x height のスプライトとして読み、
    (x, y) を左上として描画します。画面端では反対側に折り返します。
    描画によって点灯していたピクセルが消灯した場合、VF=1 となります。
    """
    bus.check_range(state.i, height)
    state.vf = 0

    for row in range(height):
        sprite_byte = bus.read(state.i + row)
        for col in range(8):
            if sprite_byte & (0x80 >> col) == 0:
                continue
            px = (x + col) % DISPLAY_WIDTH
            py = (y + row) % DISPLAY_HEIGHT
            index, mask = pixel_position(px, py)
            if state.framebuffer[index] & mask:
                state.vf = 1
            state.framebuffer[index] ^= mask

# @intent:responsibility フレームバッファを行ごとのピクセル真偽値リストとして列挙します（表示・テスト用）。
def iter_rows(framebuffer: bytes) -> Iterator[List[bool]]:
    for y in range(DISPLAY_HEIGHT):
        yield [get_pixel(framebuffer, x, y) for x in range(DISPLAY_WIDTH)]
