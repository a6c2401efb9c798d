"""Allow running as: python -m reviewbench"""

from .cli import main

if __name__ == "__main__":
    main()
