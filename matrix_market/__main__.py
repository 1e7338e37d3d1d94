"""Package entry point for ``python -m matrix_market``.

WHY: Users run the tools as ``python -m matrix_market stats *.mtx``
without installing the console script. Python's ``-m`` flag looks for
``__main__.py`` inside the package and executes it.

RULES:
- This file must exist for ``python -m matrix_market`` to work
- All argument handling lives in the CLI's main()
"""

from matrix_market.cli import main

if __name__ == "__main__":
    main()
