"""Edge constraint plugins, one module per edge family."""
