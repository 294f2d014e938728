"""
Development Runner
==================
Starts Harmonic Explorer straight from a source checkout, without installing
the package. Installed copies use the `harmonicexplorer` console script.

Without arguments the runner logs at DEBUG level, so tone selection, stream
start/stop and export progress all show up in the console. Any arguments are
passed on unchanged to the application's own parser.

Usage:
    $ python run.py                       # DEBUG console log
    $ python run.py --log-file run.log    # INFO console, DEBUG file
"""
import sys
import os
from typing import List

DEVELOPMENT_ARGS: List[str] = ["--debug"]

# Resolve 'harmonicexplorer' from the src layout
current_dir: str = os.path.dirname(os.path.abspath(__file__))
sys.path.insert(0, os.path.join(current_dir, 'src'))

# Own taskbar entry on Windows instead of the python.exe one
appid = 'HarmonicExplorer.Desktop'
try:
    import ctypes
    ctypes.windll.shell32.SetCurrentProcessExplicitAppUserModelID(appid)
except (AttributeError, ImportError):
    pass

from harmonicexplorer.main import main

if __name__ == "__main__":
    main(sys.argv[1:] or DEVELOPMENT_ARGS)
