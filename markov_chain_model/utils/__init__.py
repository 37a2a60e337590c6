"""Support code: JSON document store, config, logging and thread helpers."""
