# tests/config/test_host_config.py
"""
retro_chip8.config の単体テスト（YAML設定の読み込み、上書き、システム構築）。
"""
import pytest

from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import HostConfig, DEFAULT_KEYMAP
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.errors import ConfigError


@pytest.fixture
def loader():
    return ConfigLoader()


def test_defaults():
    config = HostConfig()
    assert config.clock == 500
    assert config.scale == 10
    assert config.background == "#000000"
    assert config.foreground == "#FFFFFF"
    assert config.volume == 0.25
    assert config.tone == 880.0
    assert config.seed is None
    assert config.keymap == DEFAULT_KEYMAP

# @intent:test_case YAMLファイルの値が設定に反映され、キーマップは既定値に対して上書きされることを検証します。
def test_load_from_file(tmp_path, loader):
    path = tmp_path / "chip8.yaml"
    path.write_text(
        "clock: 700\n"
        "scale: 8\n"
        "background: '#102030'\n"
        "foreground: '#a0b0c0'\n"
        "volume: 0.5\n"
        "tone: 440\n"
        "seed: 0x10\n"
        "keymap:\n"
        "  q: 0x4\n"
        "  space: 0\n"
    )
    config = loader.load_from_file(str(path))
    assert config.clock == 700
    assert config.scale == 8
    assert config.background == "#102030"
    assert config.foreground == "#A0B0C0"
    assert config.volume == 0.5
    assert config.tone == 440.0
    assert config.seed == 16
    assert config.keymap["Q"] == 4
    assert config.keymap["SPACE"] == 0
    assert config.keymap["F"] == 0xF

def test_empty_file_gives_defaults(tmp_path, loader):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    assert loader.load_from_file(str(path)) == HostConfig()

@pytest.mark.parametrize("content", [
    "clock: 0\n",
    "clock: fast\n",
    "scale: -1\n",
    "background: red\n",
    "foreground: '#12345'\n",
    "volume: 1.5\n",
    "volume: true\n",
    "keymap:\n  q: 16\n",
    "keymap: [1, 2]\n",
    "keymap:\n  NoSuchKey: 1\n",
    "- just\n- a list\n",
    "clock: [\n",
])
def test_invalid_values(tmp_path, loader, content):
    path = tmp_path / "bad.yaml"
    path.write_text(content)
    with pytest.raises(ConfigError):
        loader.load_from_file(str(path))

def test_missing_file(tmp_path, loader):
    with pytest.raises(ConfigError):
        loader.load_from_file(str(tmp_path / "missing.yaml"))

# @intent:test_case コマンドライン引数による上書きはNoneを無視し、値を検証することを検証します。
def test_apply_overrides(loader):
    config = loader.apply_overrides(HostConfig(), clock=1000, background="#ff0000", volume=None)
    assert config.clock == 1000
    assert config.background == "#FF0000"
    assert config.volume == 0.25

    with pytest.raises(ConfigError):
        loader.apply_overrides(HostConfig(), volume=-0.1)
    with pytest.raises(ConfigError):
        loader.apply_overrides(HostConfig(), foreground="white")

def test_build_system():
    cpu, bus = SystemBuilder().build_system(HostConfig(seed=3))
    assert isinstance(cpu, Chip8Cpu)
    bus.write(0xFFF, 0x01)
    assert cpu.peek(0xFFF) == 0x01
    assert cpu.get_state().pc == 0x200

def test_seed_makes_random_reproducible():
    values = []
    for _ in range(2):
        cpu, _ = SystemBuilder().build_system(HostConfig(seed=42))
        # C0 FF: RND V0, #FF
        cpu.load_program(bytes([0xC0, 0xFF, 0xC1, 0xFF]))
        cpu.tick()
        cpu.tick()
        values.append((cpu.get_state().v[0], cpu.get_state().v[1]))
    assert values[0] == values[1]
