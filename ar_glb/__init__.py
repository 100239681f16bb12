"""AR display-scaling backend for heritage GLB models."""
