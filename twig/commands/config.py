# The command: twig config <key> <value>
# What it does: A user-facing command to set a configuration key-value pair (e.g., user.name)
# How it does: It acts as a simple dispatcher, passing the key and value to the `write_config` function in the `utils/config.py` module, which handles the file I/O and parsing logic
# What data structure it uses: None directly, but it provides the interface to the underlying Map / Dictionary structure managed by `utils/config.py`

import sys

from twig.utils import config as config_utils
from twig.utils import repository
from twig.utils.errors import TwigError


def run(args):
    repo_root = repository.find_repo_root()
    if not repo_root:
        print("fatal: not a twig repository", file=sys.stderr)
        sys.exit(1)

    try: # Set the configuration key-value pair
        config_utils.write_config(repo_root, args.key, args.value)
    except (TwigError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        sys.exit(1)
    print(f"Set {args.key} to '{args.value}'")
