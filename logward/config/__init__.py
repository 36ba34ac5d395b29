"""Engine configuration: schema, YAML loading and defaults."""
