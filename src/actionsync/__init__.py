"""actionsync - sync changed ``actions/`` task folders to remote custom tasks."""

__version__ = "0.0.1"
