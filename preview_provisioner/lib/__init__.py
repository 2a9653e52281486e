"""Host helpers: commands, packages, services, files."""
