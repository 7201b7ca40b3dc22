"""Main pygame loop for the aquarium."""

from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import List, Optional, Sequence

import pygame

from ..assets import DescriptorAssetLoader, LoadScheduler
from ..catalog import CatalogEntry, Selection, load_catalog
from ..config import settings
from ..config.constants import DEFAULT_SOURCE
from ..config.settings import AquariumSettings
from ..entities.lanes import DEFAULT_LANES, LaneAllocator
from ..rendering.renderer import Renderer
from ..systems import telemetry
from ..world.viewport import ViewportModel
from .arena import CreatureArena
from .scheduler import FrameScheduler
from .state import AquariumState
from .tank import TankLayout, load_tank

_SELECTION_KEYS = [getattr(pygame, f"K_{digit}") for digit in range(1, 10)]


def _initialise_logger() -> logging.Logger:
    log_dir = settings.LOG_DIRECTORY
    if not isinstance(log_dir, Path):
        log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / settings.DEBUG_LOG_FILE

    # Attach to the package logger so assets, motion and simulation share one file.
    logger = logging.getLogger("aquarium")
    if logger.handlers:
        return logging.getLogger("aquarium.simulation")

    level_name = str(settings.DEBUG_LOG_LEVEL).upper()
    level = getattr(logging, level_name, logging.INFO)
    logger.setLevel(level)

    file_handler = logging.FileHandler(log_path, mode="w", encoding="utf-8")
    file_handler.setLevel(level)
    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    file_handler.setFormatter(formatter)
    logger.addHandler(file_handler)
    logger.propagate = False

    simulation_logger = logging.getLogger("aquarium.simulation")
    simulation_logger.info("Debug logging initialised at %s", log_path)
    return simulation_logger


def _load_catalog(path: Path, logger: logging.Logger) -> List[CatalogEntry]:
    try:
        return load_catalog(path)
    except FileNotFoundError:
        logger.warning("No catalog at %s; only the default creature is available", path)
        return []


def build_state(
    runtime: AquariumSettings,
    viewport: ViewportModel,
    loads: LoadScheduler,
    logger: logging.Logger,
) -> AquariumState:
    """Create the arena and fill it from the tank file or the selection."""

    layout: Optional[TankLayout] = None
    if runtime.TANK_FILE:
        layout = load_tank(runtime.TANK_FILE)
    lanes = LaneAllocator(layout.lanes if layout else DEFAULT_LANES)
    arena = CreatureArena(viewport, loads, lanes=lanes, defaults=runtime)

    catalog = _load_catalog(runtime.CATALOG_FILE, logger)
    state = AquariumState(arena=arena, catalog=catalog, default_source=DEFAULT_SOURCE)
    if layout is not None:
        state.populate(layout.creatures)
    else:
        state.selection = Selection.from_ids(catalog, runtime.selected_ids)
        state.sync_selection()
    return state


def run(runtime_settings: Optional[AquariumSettings] = None) -> None:
    """Start the pygame aquarium."""

    runtime = runtime_settings or settings.current_settings()
    logger = _initialise_logger()

    if runtime.TELEMETRY_ENABLED:
        telemetry.enable_telemetry("all")
        logger.info("Telemetry enabled; writing JSONL samples to %s", runtime.LOG_DIRECTORY / "telemetry")
    else:
        logger.info("Telemetry disabled; set AQUARIUM_TELEMETRY=1 to capture motion data")

    pygame.init()
    screen = pygame.display.set_mode((runtime.WINDOW_WIDTH, runtime.WINDOW_HEIGHT), pygame.RESIZABLE)
    pygame.display.set_caption("Aquarium")
    clock = pygame.time.Clock()

    viewport = ViewportModel(runtime.WINDOW_WIDTH, runtime.WINDOW_HEIGHT, runtime.WORLD_HEIGHT)
    loads = LoadScheduler(DescriptorAssetLoader(runtime.ASSET_ROOT), max_workers=runtime.LOADER_WORKERS)
    renderer = Renderer(viewport)

    try:
        state = build_state(runtime, viewport, loads, logger)
        scheduler = FrameScheduler(state.arena, loads, max_delta=runtime.MAX_DELTA)

        running = True
        while running:
            delta_time = clock.tick(runtime.FPS) / 1000.0

            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.VIDEORESIZE:
                    screen = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                    viewport.resize(event.w, event.h)
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key in _SELECTION_KEYS and not runtime.TANK_FILE:
                        state.toggle_index(_SELECTION_KEYS.index(event.key))

            frames = scheduler.frame(delta_time)
            renderer.draw(screen, frames)
            pygame.display.flip()
    finally:
        loads.shutdown()
        telemetry.flush_all()
        pygame.quit()
        logger.info("Aquarium closed")


def main(argv: Optional[Sequence[str]] = None) -> None:
    runtime_settings = settings.load_runtime_settings(sys.argv[1:] if argv is None else argv)
    settings.apply_runtime_settings(runtime_settings)
    run(runtime_settings)
