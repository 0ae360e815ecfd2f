"""Domain layer: cached projections, mappers and cache interfaces."""
