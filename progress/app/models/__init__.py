from progress.app.models.progress_models import ProgressEntry

__all__ = [
    "ProgressEntry",
]
