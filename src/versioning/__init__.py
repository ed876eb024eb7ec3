"""Formula version resolution: data models and the revision resolver."""
