"""
オペコードと命令実装のマッピング定義。

キーはオペコードのうち命令を識別するビットだけを残した値です
（例: 8xy4 -> 0x8004, Fx33 -> 0xF033, 1nnn -> 0x1000）。
"""
from . import control
from . import alu
from . import load
from . import graphics
from . import keys

# @intent:map 上位ニブルでは命令が決まらないファミリーについて、命令識別に使う下位ビットのマスク。
SUBCODE_MASKS = {
    0x8: 0xF00F, # 下位ニブル
    0xE: 0xF0FF, # 下位バイト
    0xF: 0xF0FF, # 下位バイト
}

# @intent:responsibility オペコードから命令テーブルのキーを求めます（2段階ディスパッチ）。
def dispatch_key(opcode: int) -> int:
    """
    1段目: 上位ニブルでファミリーを決定します。
    2段目: 0x0, 0x8, 0xE, 0xF ファミリーは下位バイト／下位ニブルで命令を決定します。
    """
    family = opcode >> 12
    if family == 0x0:
        if opcode in (0x00E0, 0x00EE):
            return opcode
        if opcode & 0xFFF0 == 0x00C0:
            return 0x00C0
        return 0x0000
    mask = SUBCODE_MASKS.get(family)
    if mask is not None:
        return opcode & mask
    return opcode & 0xF000

# @intent:map 命令キーからデコード関数へのマッピングテーブル。
DECODE_MAP = {
    # Control
    0x0000: control.decode_sys,
    0x00EE: control.decode_ret,
    0x1000: control.decode_jp,
    0x2000: control.decode_call,
    0x3000: control.decode_se_imm,
    0x4000: control.decode_sne_imm,
    0x5000: control.decode_se_reg,
    0x9000: control.decode_sne_reg,
    0xB000: control.decode_jp_v0,

    # ALU
    0x7000: alu.decode_add_imm,
    0x8000: alu.decode_ld_reg,
    0x8001: alu.decode_or,
    0x8002: alu.decode_and,
    0x8003: alu.decode_xor,
    0x8004: alu.decode_add_reg,
    0x8005: alu.decode_sub,
    0x8006: alu.decode_shr,
    0x8007: alu.decode_subn,
    0x800E: alu.decode_shl,
    0xC000: alu.decode_rnd,

    # Load/Store
    0x6000: load.decode_ld_imm,
    0xA000: load.decode_ld_i,
    0xF007: load.decode_ld_vx_dt,
    0xF015: load.decode_ld_dt,
    0xF018: load.decode_ld_st,
    0xF01E: load.decode_add_i,
    0xF029: load.decode_ld_f,
    0xF033: load.decode_ld_bcd,
    0xF055: load.decode_store,
    0xF065: load.decode_read,

    # Graphics
    0x00E0: graphics.decode_cls,
    0x00C0: graphics.decode_scd,
    0xD000: graphics.decode_drw,

    # Keys
    0xE09E: keys.decode_skp,
    0xE0A1: keys.decode_sknp,
    0xF00A: keys.decode_wait_key,
}

# @intent:map 命令キーから実行関数へのマッピングテーブル。
EXECUTE_MAP = {
    # Control
    0x0000: control.execute_sys,
    0x00EE: control.execute_ret,
    0x1000: control.execute_jp,
    0x2000: control.execute_call,
    0x3000: control.execute_se_imm,
    0x4000: control.execute_sne_imm,
    0x5000: control.execute_se_reg,
    0x9000: control.execute_sne_reg,
    0xB000: control.execute_jp_v0,

    # ALU
    0x7000: alu.execute_add_imm,
    0x8000: alu.execute_ld_reg,
    0x8001: alu.execute_or,
    0x8002: alu.execute_and,
    0x8003: alu.execute_xor,
    0x8004: alu.execute_add_reg,
    0x8005: alu.execute_sub,
    0x8006: alu.execute_shr,
    0x8007: alu.execute_subn,
    0x800E: alu.execute_shl,
    0xC000: alu.execute_rnd,

    # Load/Store
    0x6000: load.execute_ld_imm,
    0xA000: load.execute_ld_i,
    0xF007: load.execute_ld_vx_dt,
    0xF015: load.execute_ld_dt,
    0xF018: load.execute_ld_st,
    0xF01E: load.execute_add_i,
    0xF029: load.execute_ld_f,
    0xF033: load.execute_ld_bcd,
    0xF055: load.execute_store,
    0xF065: load.execute_read,

    # Graphics
    0x00E0: graphics.execute_cls,
    0x00C0: graphics.execute_scd,
    0xD000: graphics.execute_drw,

    # Keys
    0xE09E: keys.execute_skp,
    0xE0A1: keys.execute_sknp,
    0xF00A: keys.execute_wait_key,
}
