"""repometer services for single and batch evaluation."""

from repometer.services.batch import BatchResult, batch_evaluate, load_url_file
from repometer.services.evaluator import evaluate_repository

__all__ = ["BatchResult", "batch_evaluate", "evaluate_repository", "load_url_file"]
