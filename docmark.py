#!/usr/bin/env python3
"""
docmark - rich-text document renderer

Simple usage:
    python docmark.py page.json                 # Outputs page.md
    python docmark.py page.json --syntax html   # Outputs page.html
    python docmark.py /folder/path              # Renders all .json documents in folder
"""

import sys
from pathlib import Path

# Add src to path for development
src_path = Path(__file__).parent / "src"
if src_path.exists():
    sys.path.insert(0, str(src_path))

from docmark.cli import app

if __name__ == "__main__":
    app()
