"""Allows `python -m harmonicexplorer`."""
from harmonicexplorer.main import main

if __name__ == "__main__":
    main()
