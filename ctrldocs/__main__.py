"""``python -m ctrldocs`` and the ``ctrldocs`` console script."""

import sys

from main import main


def run() -> None:
    sys.exit(main(sys.argv[1:]))


if __name__ == "__main__":
    run()
