"""Cabinet - a FastAPI snippet store for saved network topologies."""
