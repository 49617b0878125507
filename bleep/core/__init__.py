"""Build orchestration core: graph resolution, pre-build steps, timing, events."""
