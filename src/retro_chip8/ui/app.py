# src/retro_chip8/ui/app.py
"""
アプリケーションのエントリポイント。
コマンドライン引数と設定ファイルからホスト設定を組み立て、ROMをロードしてメインウィンドウを起動します。
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from PySide6.QtWidgets import QApplication

from retro_chip8.arch.chip8.cpu import Chip8Cpu
from retro_chip8.config.builder import SystemBuilder
from retro_chip8.config.loader import ConfigLoader
from retro_chip8.config.models import HostConfig
from retro_chip8.errors import ConfigError, RomError
from retro_chip8.loader.loader import RomLoader
from retro_chip8.runtime.runner import Runner
from .main_window import MainWindow

logger = logging.getLogger(__name__)

# @intent:responsibility QApplicationを生成し、CPUを実行するメインウィンドウを表示します。
def run_app(config: HostConfig, cpu: Chip8Cpu) -> int:
    from .beeper import SquareWaveBeeper

    app = QApplication.instance() or QApplication(sys.argv)
    runner = Runner(cpu, clock=config.clock)
    beeper = SquareWaveBeeper(frequency=config.tone, volume=config.volume)
    window = MainWindow(runner, config, beeper=beeper)
    window.show()
    window.start()
    return app.exec()


@click.command()
@click.argument(
    "rom",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
)
@click.option(
    "-c", "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML host configuration file",
)
@click.option(
    "--background",
    type=str,
    default=None,
    help="Background color as #RRGGBB (default: #000000)",
)
@click.option(
    "--foreground",
    type=str,
    default=None,
    help="Foreground color as #RRGGBB (default: #FFFFFF)",
)
@click.option(
    "--volume",
    type=float,
    default=None,
    help="Beep volume between 0.0 and 1.0 (default: 0.25)",
)
@click.option(
    "--clock",
    type=int,
    default=None,
    help="Ticks per second (default: 500)",
)
@click.option(
    "--scale",
    type=int,
    default=None,
    help="Screen pixels per CHIP-8 pixel (default: 10)",
)
@click.option(
    "--seed",
    type=int,
    default=None,
    help="Random seed for the Cxnn instruction",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Verbose output",
)
def main(
    rom: Path,
    config_path: Optional[Path],
    background: Optional[str],
    foreground: Optional[str],
    volume: Optional[float],
    clock: Optional[int],
    scale: Optional[int],
    seed: Optional[int],
    verbose: bool,
) -> None:
    """
    Run a CHIP-8 program.

    ROM is the raw program image, loaded at address 0x200.

    Keys 0-9 and A-F drive the matching CHIP-8 keys unless the config
    file remaps them.
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config_loader = ConfigLoader()
    try:
        config = config_loader.load_from_file(str(config_path)) if config_path else HostConfig()
        config = config_loader.apply_overrides(
            config,
            background=background,
            foreground=foreground,
            volume=volume,
            clock=clock,
            scale=scale,
            seed=seed,
        )
    except ConfigError as e:
        raise click.BadParameter(str(e)) from e

    cpu, _ = SystemBuilder().build_system(config)
    try:
        RomLoader().load_rom(str(rom), cpu)
    except RomError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    logger.info("Loaded %s", rom)
    sys.exit(run_app(config, cpu))

if __name__ == '__main__':
    main()
