from .lifecycle import bulk_verify, correct, reject, submit, verify
from .promotion import promote, scoring_context_for
