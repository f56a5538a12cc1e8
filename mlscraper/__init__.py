"""Music League submission harvester.

This package walks a Music League account's leagues and rounds in a real
browser and writes every submission it finds to a CSV file, with a clean
separation between parsing (pure locators over DOM snapshots) and I/O (the
page accessor and record sinks).
"""
