import time
import logging
import signal
import argparse

from core.config_loader import load_config
from core.matcher import MatchLifecycleService
from database.uow import matching_uow
from database.init_db import init_db

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

# Global flag for graceful shutdown
running = True

def signal_handler(sig, frame):
    global running
    logger.info("Shutdown signal received")
    running = False

signal.signal(signal.SIGINT, signal_handler)
signal.signal(signal.SIGTERM, signal_handler)


def run_sweep_cycle(config, program_id=None):
    """
    Auto-reject every pending match whose acceptance window has passed.

    Returns:
        Number of matches auto-rejected
    """
    cycle_start = time.time()

    with matching_uow() as repo:
        lifecycle = MatchLifecycleService(repo.db, config.matching)
        swept = lifecycle.sweep_expired_matches(program_id=program_id)

    cycle_elapsed = time.time() - cycle_start
    logger.info(f"=== Sweep completed in {cycle_elapsed:.2f}s: {swept} matches auto-rejected ===")
    return swept


def main():
    parser = argparse.ArgumentParser(description="MentorMatch auto-reject scheduler")
    parser.add_argument('--once', action='store_true',
                      help='Run a single sweep and exit')
    parser.add_argument('--program-id', type=str, default=None,
                      help='Only sweep matches of this programme')
    args = parser.parse_args()

    logger.info("Auto-reject scheduler starting...")

    # Initialize DB (with retry logic)
    init_db()

    config = load_config()
    interval = config.schedule.sweep_interval_seconds

    if args.once:
        run_sweep_cycle(config, args.program_id)
        return

    cycle_count = 0
    while running:
        cycle_count += 1
        logger.info(f"=== Starting Sweep #{cycle_count} ===")
        try:
            run_sweep_cycle(config, args.program_id)
        except Exception as e:
            logger.error(f"Error in main loop: {e}", exc_info=True)

        if running:
            logger.info(f"=== Sweep #{cycle_count} done. Sleeping for {interval} seconds... ===")
            # Sleep in chunks to allow responsive shutdown
            for _ in range(max(1, interval // 5)):
                if not running: break
                time.sleep(5)

if __name__ == "__main__":
    main()
