"""Interaktive Konsolen-Oberfläche (rich)."""

from ui.menu import run_menu

__all__ = ["run_menu"]
