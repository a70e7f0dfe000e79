"""nixtop - Nix build farm process dashboard."""

__version__ = "0.1.0"
