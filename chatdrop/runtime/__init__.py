"""Runtime package -- attachment pipeline, settings and telemetry."""
