"""Entrypoints (inbound adapters) for COURSE.

Expose the application to the outside world: the CLI, the HTTP API server and
the one-shot seeder. The two runnable units implement
`course.interfaces.RunnableUnit`.
"""
