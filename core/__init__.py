"""Core graph consistency layer: schema rules, edge identity and the graph store."""
