"""Pytest configuration for trustdecay tests."""
import sys
from pathlib import Path

# Make the src/ layout importable without installing the package
project_root = Path(__file__).resolve().parent.parent
src_path = project_root / "src"

sys.path.insert(0, str(src_path))
