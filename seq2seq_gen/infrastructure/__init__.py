"""Infrastructure layer: samplers, model executors and progress callbacks."""
