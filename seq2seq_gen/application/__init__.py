"""Application layer: wires domain entities to samplers and executors."""
