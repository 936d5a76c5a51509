# tests/arch/chip8/test_chip8_cpu.py
"""
retro_chip8.arch.chip8.cpu の単体テスト。
tick / step による命令サイクル、タイマー、停止、マシン障害、プログラムのロードを検証します。
"""
import pytest

from retro_chip8.transport.bus import Bus, RAM
from retro_chip8.arch.chip8.cpu import Chip8Cpu, MAX_PROGRAM_SIZE
from retro_chip8.errors import (
    MachineFault,
    MemoryAccessError,
    RomError,
    StackOverflowError,
    StackUnderflowError,
)

# @intent:test_suite CHIP-8 CPUの命令サイクルとライフサイクルを検証します。

@pytest.fixture
def cpu():
    bus = Bus()
    bus.register_device(0x000, 0xFFF, RAM(0x1000))
    return Chip8Cpu(bus, seed=0)


class TestLifecycle:
    def test_initial_state(self, cpu):
        state = cpu.get_state()
        assert state.pc == 0x200
        assert state.sp == 0
        assert state.i == 0
        assert state.v == [0] * 16
        assert not cpu.halted
        assert cpu.get_framebuffer() == bytes(256)

    # @intent:test_case リセットでメモリ、レジスタ、スタック、タイマー、フレームバッファ、キー入力、停止フラグが初期化されることを検証します。
    def test_reset_clears_everything(self, cpu):
        cpu.load_program(bytes([0x12, 0x00]))
        state = cpu.get_state()
        state.v[3] = 9
        state.i = 0x345
        state.stack[0] = 0x222
        state.sp = 1
        state.delay_timer = 5
        state.sound_timer = 5
        state.framebuffer[10] = 0xFF
        state.keypad = 0x0012
        state.previous_keypad = 0x0003
        cpu.halt()

        cpu.reset()
        state = cpu.get_state()
        assert state.pc == 0x200
        assert state.v == [0] * 16
        assert state.i == 0
        assert state.sp == 0
        assert state.stack == [0] * 16
        assert state.delay_timer == 0
        assert state.sound_timer == 0
        assert cpu.get_framebuffer() == bytes(256)
        assert not cpu.halted
        assert cpu.peek(0x200) == 0
        assert state.keypad == 0
        assert state.previous_keypad == 0

    def test_load_program(self, cpu):
        cpu.load_program(bytes([0xA1, 0x23, 0x60, 0x01]))
        assert cpu.peek(0x200) == 0xA1
        assert cpu.peek(0x203) == 0x01
        assert cpu.get_state().pc == 0x200

    def test_load_program_max_size(self, cpu):
        data = bytes([0xAA]) * MAX_PROGRAM_SIZE
        cpu.load_program(data)
        assert cpu.peek(0xFFF) == 0xAA

    # @intent:test_case 空、または大きすぎるプログラムは状態を変更せずにRomErrorになることを検証します。
    @pytest.mark.parametrize("size", [0, MAX_PROGRAM_SIZE + 1])
    def test_load_program_rejects_bad_size(self, cpu, size):
        cpu.load_program(bytes([0x60, 0x07]))
        cpu.tick()
        with pytest.raises(RomError):
            cpu.load_program(bytes(size))
        assert cpu.get_state().v[0] == 0x07
        assert cpu.peek(0x200) == 0x60


class TestExecution:
    # @intent:test_case 60 05 61 03 80 14 を3回tickすると V0=8, VF=0, PC=0x206 となることを検証します。
    def test_add_program_scenario(self, cpu):
        cpu.load_program(bytes([0x60, 0x05, 0x61, 0x03, 0x80, 0x14]))
        for _ in range(3):
            cpu.tick()
        state = cpu.get_state()
        assert state.v[0] == 8
        assert state.vf == 0
        assert state.pc == 0x206

    def test_snapshot(self, cpu):
        cpu.load_program(bytes([0x80, 0x14]))
        snapshot = cpu.step()
        assert snapshot.operation.mnemonic == "ADD"
        assert snapshot.metadata.symbol_info == "ADD V0, V1"
        assert snapshot.metadata.cycle_count == 1
        assert snapshot.state is cpu.get_state()

    def test_tick_decrements_timers_before_execute(self, cpu):
        # F0 07: LD V0, DT
        cpu.load_program(bytes([0xF0, 0x07]))
        state = cpu.get_state()
        state.delay_timer = 10
        state.sound_timer = 1
        assert cpu.sound_active
        cpu.tick()
        assert state.delay_timer == 9
        assert state.v[0] == 9
        assert state.sound_timer == 0
        assert not cpu.sound_active

    def test_timers_stop_at_zero(self, cpu):
        cpu.load_program(bytes([0x12, 0x00]))
        for _ in range(5):
            cpu.tick()
        assert cpu.get_state().delay_timer == 0
        assert cpu.get_state().sound_timer == 0

    # @intent:test_case 同じスプライトを同じ位置に2回描くと元の画面に戻り、2回目はVF=1となることを検証します。
    def test_draw_twice_restores_framebuffer(self, cpu):
        # A2 0A: LD I, $20A / 60 3C: LD V0, 60 / 61 1E: LD V1, 30
        # D0 15: DRW V0, V1, 5 (x2)
        program = bytes([
            0xA2, 0x0A, 0x60, 0x3C, 0x61, 0x1E, 0xD0, 0x15, 0xD0, 0x15,
            0xF0, 0x90, 0xF0, 0x90, 0xF0,
        ])
        cpu.load_program(program)
        before = cpu.get_framebuffer()
        for _ in range(4):
            cpu.tick()
        assert cpu.get_framebuffer() != before
        assert cpu.get_state().vf == 0
        cpu.tick()
        assert cpu.get_framebuffer() == before
        assert cpu.get_state().vf == 1

    def test_cls_after_draws(self, cpu):
        # A2 0A / D0 15 / 70 09 / D0 15 / 00 E0
        program = bytes([0xA2, 0x0A, 0xD0, 0x15, 0x70, 0x09, 0xD0, 0x15, 0x00, 0xE0, 0xFF, 0x81, 0x81, 0x81, 0xFF])
        cpu.load_program(program)
        for _ in range(4):
            cpu.tick()
        assert cpu.get_framebuffer() != bytes(256)
        cpu.tick()
        assert cpu.get_framebuffer() == bytes(256)

    def test_unknown_opcode_continues(self, cpu):
        cpu.load_program(bytes([0xFF, 0xFF, 0x60, 0x01]))
        cpu.tick()
        cpu.tick()
        assert cpu.get_state().v[0] == 1
        assert not cpu.halted


class TestKeyWait:
    # @intent:test_case キーマスクが変化しない間はPCが進まず、押下を観測したら最小番号のキーを取り込むことを検証します。
    def test_wait_until_transition(self, cpu):
        cpu.load_program(bytes([0xF3, 0x0A, 0x12, 0x02]))
        for _ in range(5):
            cpu.tick()
            assert cpu.get_state().pc == 0x200

        cpu.key_down((1 << 0xB) | (1 << 0x7))
        cpu.tick()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().v[3] == 0x7

    def test_held_key_is_not_a_new_press(self, cpu):
        cpu.load_program(bytes([0x12, 0x02, 0xF3, 0x0A]))
        cpu.key_down(1 << 0x4)
        # 1命令実行後にラッチされるため、押しっぱなしは新しい押下とはみなされない
        cpu.tick()
        assert cpu.get_state().pc == 0x202
        cpu.tick()
        assert cpu.get_state().pc == 0x202
        assert cpu.get_state().v[3] == 0

    def test_release_is_not_a_press(self, cpu):
        cpu.load_program(bytes([0xF3, 0x0A]))
        cpu.key_down(1 << 0x4)
        cpu.key_up(1 << 0x4)
        cpu.tick()
        assert cpu.get_state().pc == 0x200

    def test_set_key_mask(self, cpu):
        cpu.set_key_mask(0x1_0001)
        state = cpu.get_state()
        assert state.keypad == 0x0001
        assert state.previous_keypad == 0


class TestHaltAndFaults:
    def test_halt_stops_execution(self, cpu):
        cpu.load_program(bytes([0x60, 0x05]))
        cpu.get_state().delay_timer = 3
        cpu.halt()
        snapshot = cpu.tick()
        assert snapshot.operation.mnemonic == "HALT"
        assert cpu.get_state().pc == 0x200
        assert cpu.get_state().v[0] == 0
        assert cpu.get_state().delay_timer == 3

    # @intent:test_case マシン障害が発生するとCPUは停止し、障害に命令のアドレスが記録されることを検証します。
    def test_stack_underflow_halts(self, cpu):
        cpu.load_program(bytes([0x60, 0x01, 0x00, 0xEE]))
        cpu.tick()
        with pytest.raises(StackUnderflowError) as excinfo:
            cpu.tick()
        assert excinfo.value.pc == 0x202
        assert "0x202" in str(excinfo.value)
        assert cpu.halted
        assert cpu.tick().operation.mnemonic == "HALT"

    def test_stack_overflow_halts(self, cpu):
        # 22 00: CALL $200 (無限再帰)
        cpu.load_program(bytes([0x22, 0x00]))
        for _ in range(16):
            cpu.tick()
        with pytest.raises(StackOverflowError):
            cpu.tick()
        assert cpu.halted
        assert cpu.get_state().sp == 16

    def test_fetch_outside_memory_halts(self, cpu):
        # 60 FF: LD V0, #FF / BF 01: JP V0, $F01 -> PC = 0x1000
        cpu.load_program(bytes([0x60, 0xFF, 0xBF, 0x01]))
        cpu.tick()
        cpu.tick()
        assert cpu.get_state().pc == 0x1000
        with pytest.raises(MemoryAccessError) as excinfo:
            cpu.tick()
        assert excinfo.value.address == 0x1000
        assert isinstance(excinfo.value, MachineFault)
        assert cpu.halted

    def test_draw_outside_memory_halts(self, cpu):
        # AF FF: LD I, $FFF / D0 02: DRW V0, V0, 2
        cpu.load_program(bytes([0xAF, 0xFF, 0xD0, 0x02]))
        cpu.tick()
        with pytest.raises(MemoryAccessError):
            cpu.tick()
        assert cpu.get_framebuffer() == bytes(256)

    def test_load_program_clears_halt(self, cpu):
        cpu.halt()
        cpu.load_program(bytes([0x60, 0x02]))
        assert not cpu.halted
        cpu.tick()
        assert cpu.get_state().v[0] == 2
