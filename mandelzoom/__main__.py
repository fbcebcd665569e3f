"""
Allow running the package directly: python -m mandelzoom
"""
from .app import run

if __name__ == "__main__":
    run()
