import logging

from .app import SudokuApp


def main():
    logging.basicConfig(level=logging.INFO)
    game = SudokuApp()
    game.run()


if __name__ == "__main__":
    main()
