"""
Allow running the package directly: python -m mandelbrot_explorer
"""
import sys

from .cli import main

sys.exit(main())
