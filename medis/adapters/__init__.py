"""
Adapters connecting the core services to the outside world.

- storage: durable persistence of the record list
- pdf: report export
- console: terminal rendering
"""
