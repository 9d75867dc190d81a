"""meritwise: aggregate calculator, admission chance and preference list ranking."""
from .aggregate import calculate_aggregate, validate_payload, validate_score_input
from .catalog import ProgramCatalog, UnknownProgramError
from .config import load_config, setup_logging
from .models import (
    generate_preference_list, predict_chance, predict_merit_list, recommend_net_score, required_net_score,
)
from .scorer import AdmissionScorer

__version__ = "0.1.0"
