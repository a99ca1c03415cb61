"""
Helm Simulator Application
==========================

Command-line entry point. Runs the simulation with a logging display and
reads helm commands from stdin, one per line:

    +  throttle up      -  throttle down
    l  rudder left      r  rudder right
    q  quit
"""

import sys
import signal
import argparse
import threading
import logging
from typing import Optional, List, TextIO

from .display.sink import LoggingDisplay, DisplayError
from .control.triggers import ControlCommand, ControlTriggerSource
from .simulation.loops.orchestrator import (
    SimulationOrchestrator,
    SimulationConfig,
    SimulationHalted,
    load_config,
)

logger = logging.getLogger(__name__)


def read_commands(controls: ControlTriggerSource, stream: TextIO):
    """Dispatch one command per input line until EOF or shutdown."""
    for line in stream:
        if controls.shutdown.is_fired:
            break
        if not line.strip():
            continue
        try:
            controls.dispatch_text(line)
        except DisplayError as e:
            logger.error(f"Display refresh failed: {e}")
            controls.shutdown.fire("Display failure")
            break
    logger.debug("Command input closed")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Vessel propulsion and helm simulator")
    parser.add_argument("--config", "-c",
                        help="JSON simulation config file")
    parser.add_argument("--duration", "-d", type=float, default=None,
                        help="Stop after this many seconds (default: run until quit)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for the propulsion model")
    parser.add_argument("--throttle", "-t", type=int, default=0,
                        help="Throttle presses to apply at startup")
    parser.add_argument("--no-input", action="store_true",
                        help="Do not read commands from stdin")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Verbose logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = build_parser().parse_args(argv)

    # Setup logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    config = load_config(args.config) if args.config else SimulationConfig()
    if args.seed is not None:
        config.seed = args.seed

    orchestrator = SimulationOrchestrator(LoggingDisplay(), config=config)

    # Signal handler for graceful shutdown
    def signal_handler(sig, frame):
        logger.info("Shutdown signal received")
        orchestrator.shutdown.fire(f"Signal {sig}")

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    try:
        run_session(orchestrator, args)
    except (SimulationHalted, DisplayError) as e:
        logger.error(f"Simulation halted: {e}")
        return 1

    return 0


def run_session(orchestrator: SimulationOrchestrator, args: argparse.Namespace):
    """Start the simulation, feed it commands, and stop it on quit or timeout."""
    orchestrator.start()
    try:
        for _ in range(max(0, args.throttle)):
            orchestrator.controls.dispatch(ControlCommand.THROTTLE_UP)

        if not args.no_input:
            reader = threading.Thread(
                target=read_commands,
                args=(orchestrator.controls, sys.stdin),
                daemon=True,
                name="command-reader"
            )
            reader.start()

        logger.info("Simulator running. Enter 'q' or press Ctrl+C to stop.")
        orchestrator.wait(args.duration)
    finally:
        orchestrator.stop()


if __name__ == "__main__":
    sys.exit(main())
