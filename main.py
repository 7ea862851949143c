# main.py
"""
Main entry point for the Polarity Spheres animation.

This script orchestrates the entire session:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Opens the display and sets up the simulation state.
4. Runs the frame loop until the window is closed.
5. Handles clean shutdown.
"""
import logging
import sys
import cProfile
import pstats
import io

from utils import setup_logging, load_config


def run(config: dict) -> int:
    """
    Runs the frame loop and returns the number of frames rendered.
    """
    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    from simulation import Simulation
    from visualization import Visualizer

    # The visualizer determines the initial viewport size.
    visualizer = Visualizer(vis_params)
    sim = Simulation(sim_params, visualizer.width, visualizer.height)

    log_throttle = run_params.get('log_throttle_steps', 300)
    max_frames = run_params.get('max_frames', 0)
    profiler = cProfile.Profile() if run_params.get('profile', False) else None

    frame = 0
    if profiler:
        profiler.enable()
    try:
        while True:
            frame_input = visualizer.poll_input()
            if frame_input.quit:
                break
            # Applied before the frame so no half-resized state is drawn.
            if frame_input.resized is not None:
                sim.resize(*frame_input.resized)

            curves = sim.step(visualizer.now(), frame_input, visualizer)
            visualizer.present()
            frame += 1

            # Hot loops must throttle logs
            if log_throttle and frame % log_throttle == 0:
                counts = sim.particles.counts()
                logging.info(f"Frame {frame} | Particles: {counts} | Culled so far: {sim.culled_total}")
                logging.debug(f"Frame {frame} | Curves: {curves} | FPS: {visualizer.clock.get_fps():.1f}")

            if max_frames and frame >= max_frames:
                logging.info(f"Reached max_frames ({max_frames}). Stopping.")
                break
    finally:
        if profiler:
            profiler.disable()
        visualizer.close()

    logging.info(f"Frame loop finished after {frame} frames.")

    if profiler:
        logging.info("--- Performance Profile ---")
        s = io.StringIO()
        # Sort by cumulative time spent in the function
        stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
        stats.print_stats(20)
        logging.info(f"\n{s.getvalue()}")
    return frame


def main(config_path: str = 'config.json'):
    """
    The main function to run the animation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)
    logging.info("--- Polarity Spheres Starting ---")
    run(config)
    logging.info("--- Polarity Spheres Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
