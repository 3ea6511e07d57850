"""kkb - double-entry household bookkeeping."""

__version__ = "0.1.0"


# The CLI pulls in click and SQLAlchemy, so it is only loaded on first use
def __getattr__(name):
    if name == "main":
        from kkb.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
