"""Make the in-tree chatmarkup package importable without installing it.

The repository root is put first on sys.path, so pytest can be run from any
directory and always tests the working copy rather than an installed build.
"""

from pathlib import Path
import sys


ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
