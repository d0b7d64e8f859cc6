"""Integration tests that load real prompt files and render them end to end."""
