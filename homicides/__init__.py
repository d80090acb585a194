"""Core (UI-agnostic) homicide explorer logic.

This package contains:
- data loading (CSV -> pandas) and dimension extraction
- selection state and the default-year rule
- per-chart aggregators and renderers (Altair -> Vega-Lite spec dict)
- event wiring that keeps the three charts in sync
"""
