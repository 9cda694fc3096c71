"""Test package initialisation for Formula Field."""

from pathlib import Path
import sys

# Ensure the repository root is importable when tests run from an isolated
# working directory. The project uses top-level modules such as
# ``field_controller`` which are only importable with the root on ``sys.path``.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))
