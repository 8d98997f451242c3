"""Store backends, registered by name on import."""
