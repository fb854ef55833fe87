"""HTTP API for simpleflash."""
