import argparse
import sys

from ..config import add_config_arguments, config_from_args
from ..errors import ReleaseError
from ..matrix import artifact_name
from . import common


def main(argv=None):
    parser = argparse.ArgumentParser(description="Cross-compile the project for every target of the build matrix.")
    add_config_arguments(parser)
    args = parser.parse_args(argv)

    try:
        config, cells = config_from_args(args)
    except (OSError, ValueError) as e:
        parser.error(str(e))
    if not cells:
        parser.error("The build matrix is empty")

    try:
        common.prepare_build(config)
        common.build_all(config, cells)
    except ReleaseError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    print("Release artifacts are located in:", config.project_root)
    for cell in cells:
        print(f"  {artifact_name(config.binary, cell)}")


if __name__ == "__main__":
    main()
