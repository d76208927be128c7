from datetime import datetime, timezone
from pathlib import Path
import time

import hydra
from hydra.core.hydra_config import HydraConfig
from hydra.utils import instantiate
from loguru import logger
from omegaconf import DictConfig

from flexman.exceptions import ConfigError
from flexman.problems.tapping import (
    ContinuousTappingManager,
    DiscreteTappingManager,
    TappingManager,
    TappingParameters,
    compare_results,
    linspace,
    log_results,
    make_modes,
    sort_results,
)
from flexman.pso import SolverParameters, optimize_result
from flexman.search import SearchAlgorithm, perform_search
from flexman.serialization import save_run
from flexman.simulation import simulate_single_mode
from flexman.utils.logger_setup import setup_logger


_RUN_MODES = ("search", "simulation")


def check_config(cfg: DictConfig) -> None:
    if cfg.run not in _RUN_MODES:
        raise ConfigError(f"Unknown run mode '{cfg.run}', expected 'search' or 'simulation'")


def build_manager(cfg: DictConfig) -> TappingManager:
    variant = cfg.problem.variant
    if variant == "discrete":
        manager_cls = DiscreteTappingManager
    elif variant == "continuous":
        manager_cls = ContinuousTappingManager
    else:
        raise ConfigError(f"Unknown tapping variant '{variant}', expected 'discrete' or 'continuous'")
    return manager_cls(
        initial_state=[0.0, 0.0, 0.0],
        target_state=[0.0, 0.0, cfg.problem.depth],
        time_delta=cfg.search.time_delta,
        time_max=cfg.search.time_max,
        threshold=cfg.search.threshold,
        timeout=cfg.search.timeout,
        interactive=cfg.search.interactive,
    )


def run_search(cfg: DictConfig, manager: TappingManager, parameters, modes) -> None:
    algorithm = SearchAlgorithm(cfg.search.algorithm)

    logger.info("[app] Searching...")
    results = perform_search(manager, modes, cfg.search.iterations, algorithm)

    logger.info("[app] Sorting solutions...")
    sort_results(results)
    log_results(results)

    output = Path(cfg.output)
    if not output.is_absolute():
        output = Path(HydraConfig.get().runtime.output_dir) / output
    save_run(output, manager, results, modes, parameters)

    if cfg.pso.enabled:
        logger.info("[app] Running PSO...")
        solver_parameters: SolverParameters = instantiate(cfg.pso.parameters)
        optimized = optimize_result(manager, solver_parameters, modes, results, seed=cfg.pso.seed)
        log_results(optimized)
        compare_results(results, optimized)


def run_simulation(manager: TappingManager, modes) -> None:
    steps = manager.max_steps
    logger.info("[app] Simulating {} modes for {} steps...", len(modes), steps)
    for mode in modes:
        simulation = simulate_single_mode(manager, mode, steps)
        final = simulation.final_solution()
        if final is None:
            logger.info("[app] Mode {:>2}: already at the target", mode.id)
            continue
        logger.info(
            "[app] Mode {:>2}: {:>6} steps, depth {:>8.3f}, complete: {}, resources: {}",
            mode.id,
            len(simulation),
            final.state[2],
            manager.is_complete(final),
            final.resources,
        )


@hydra.main(version_base=None, config_path="config", config_name="config")
def main(cfg: DictConfig) -> None:
    """Main entrypoint with Hydra configuration management."""
    start_time = time.time()
    check_config(cfg)

    log_file_path = setup_logger(
        log_dir=cfg.logging.log_dir,
        level=cfg.logging.level,
        rotation=cfg.logging.rotation,
        retention=cfg.logging.retention,
        enable_colors=cfg.logging.enable_colors,
    )
    logger.info("[app] Experiment working directory: {}.", HydraConfig.get().runtime.output_dir)
    logger.info("[app] Log file: {}", log_file_path)
    logger.info("[app] Start time: {}", datetime.now(timezone.utc).isoformat())

    manager = build_manager(cfg)
    gear_factors = linspace(cfg.problem.max_gear, cfg.problem.min_gear, cfg.problem.num_gear)
    base_parameters: TappingParameters = instantiate(cfg.problem.parameters)
    time_delta = manager.time_delta if cfg.problem.variant == "discrete" else None
    parameters, modes = make_modes(gear_factors, time_delta, base_parameters)
    logger.info("[app] Gear factors: {}", ", ".join(f"{gear:.2f}" for gear in gear_factors))

    if cfg.run == "search":
        run_search(cfg, manager, parameters, modes)
    else:
        run_simulation(manager, modes)

    logger.info("[app] Total duration: {:.2f} seconds", time.time() - start_time)


if __name__ == "__main__":
    main()
