"""Ranking, layout, derived metrics and color scaling."""
