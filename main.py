import argparse
import logging
import sys

from rps_arena.utils.constants import *
from rps_arena.utils.config import load_config
from rps_arena.utils.errors import CameraError
from rps_arena.utils.log import setup_logging
from rps_arena.game.storage import JsonFileStore
from rps_arena.core.game_engine import GameEngine

logger = logging.getLogger("rps_arena")


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play Rock Paper Scissors against the computer with hand gestures")
    parser.add_argument("--config", default=DEFAULT_CONFIG_PATH, help="JSON config file")
    parser.add_argument("--camera", type=int, default=0, help="camera index")
    parser.add_argument("--difficulty", choices=[d.value for d in Difficulty])
    parser.add_argument("--mode", choices=[m.value for m in MatchMode])
    parser.add_argument("--store", help="file where achievements are saved")
    parser.add_argument("--practice", action="store_true", help="show detected gestures without playing rounds")
    parser.add_argument("--reports", default="reports", help="directory for PDF match reports")
    parser.add_argument("--log-level", help="DEBUG, INFO, WARNING or ERROR")
    return parser.parse_args(argv)


def build_config(args):
    cfg = load_config(args.config)
    if args.difficulty:
        cfg["game"]["difficulty"] = args.difficulty
    if args.mode:
        cfg["game"]["mode"] = args.mode
    if args.practice:
        cfg["game"]["practice"] = True
    if args.store:
        cfg["storage"]["path"] = args.store
    if args.log_level:
        cfg["logging"]["level"] = args.log_level
    return cfg


def main(argv=None):
    args = parse_args(argv)
    cfg = build_config(args)
    setup_logging(cfg["logging"]["level"], cfg["logging"]["dir"])

    engine = GameEngine(cfg, store=JsonFileStore(cfg["storage"]["path"]))

    # Imported late so --help works without a camera stack
    from rps_arena.core.camera_loop import CameraGame

    try:
        CameraGame(engine, camera_index=args.camera, report_dir=args.reports).run()
    except CameraError as e:
        logger.error("Camera error: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
