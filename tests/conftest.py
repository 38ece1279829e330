import sys, os

# Ensure src (and this directory, for helpers) is on path for test imports
ROOT = os.path.dirname(os.path.dirname(__file__))
SRC = os.path.join(ROOT, 'src')
TESTS = os.path.dirname(__file__)
for path in (SRC, TESTS):
    if path not in sys.path:
        sys.path.insert(0, path)

from helpers import ScriptedRandom, layout_from_rows, make_engine, record_events

__all__ = [
    "ScriptedRandom",
    "layout_from_rows",
    "make_engine",
    "record_events",
]
