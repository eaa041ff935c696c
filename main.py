# main.py
import argparse
import os

from runegather.config import DATA_DIR, DEFAULT_CHARACTER_ID, ELEMENTS_FILE, RESOURCES_FILE
from runegather.core.game_manager import GameManager
from runegather.utils.logger import Logger


def main():
    parser = argparse.ArgumentParser(description='Runic resource gathering')
    parser.add_argument('--data-dir', '-d', type=str, default=DATA_DIR,
                        help='Directory holding elements.json and resources.json')
    parser.add_argument('--character', '-c', type=str, default=DEFAULT_CHARACTER_ID,
                        help='Character id used for discoveries (default: %(default)s)')
    parser.add_argument('--location', '-l', type=str, default=None,
                        help='Only offer resources found at this location id')
    parser.add_argument('--log-level', type=str, default='info',
                        help='debug, info, warning, error or critical')
    args = parser.parse_args()

    Logger.set_level(args.log_level)
    check_data_directory(args.data_dir)
    game = GameManager(args.data_dir, args.character, args.location)
    game.run()


def check_data_directory(data_dir: str):
    for filename in (ELEMENTS_FILE, RESOURCES_FILE):
        if not os.path.exists(os.path.join(data_dir, filename)):
            Logger.warning("main", f"'{filename}' not found in '{data_dir}', there will be nothing to gather.")


if __name__ == "__main__":
    main()
